from typing import Dict, Iterator, List, Optional, Sequence, Tuple

Record = Dict[str, str]


class Dataset:
    """
    The parsed sheet held in memory:
      - columns: tuple of header names, in order of first appearance
      - records: tuple of dicts, every one keyed by exactly those columns
    Treated as immutable; a refresh builds a new Dataset instead of editing one.
    """

    def __init__(self, columns: Optional[Sequence[str]] = None, records: Optional[Sequence[Record]] = None):
        self.columns: Tuple[str, ...] = tuple(columns or ())
        self.records: Tuple[Record, ...] = tuple(dict(r) for r in (records or ()))
        expected = set(self.columns)
        for index, record in enumerate(self.records):
            if set(record) != expected:
                raise ValueError(f"Record {index} keys do not match dataset columns")

    @classmethod
    def empty(cls) -> "Dataset":
        return cls()

    def __len__(self) -> int:
        return len(self.records)

    def __iter__(self) -> Iterator[Record]:
        return iter(self.records)

    def __getitem__(self, index: int) -> Record:
        return self.records[index]

    def __bool__(self) -> bool:
        return bool(self.records)

    def __repr__(self) -> str:
        return f"Dataset(columns={list(self.columns)!r}, rows={len(self.records)})"

    def rows(self) -> List[List[str]]:
        """Records as plain lists in column order."""
        return [[record[c] for c in self.columns] for record in self.records]
