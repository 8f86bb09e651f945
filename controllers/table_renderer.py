from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from models.csv_model import Dataset
from services.status_service import classify, is_status_column

EMPTY_MESSAGE = "No products available"


@dataclass(frozen=True)
class RenderCell:
    text: str
    style: Optional[str] = None


@dataclass(frozen=True)
class RenderRow:
    index: int
    cells: Tuple[RenderCell, ...]

    @property
    def styles(self) -> List[str]:
        return [c.style for c in self.cells if c.style]


@dataclass(frozen=True)
class RenderTree:
    headers: Tuple[str, ...] = ()
    rows: Tuple[RenderRow, ...] = ()
    placeholder: Optional[str] = None
    status_columns: Tuple[int, ...] = field(default=())

    @property
    def is_placeholder(self) -> bool:
        return self.placeholder is not None


def render_table(dataset: Dataset) -> RenderTree:
    if not dataset:
        return RenderTree(placeholder=EMPTY_MESSAGE)

    headers = dataset.columns
    status_cols = tuple(i for i, h in enumerate(headers) if is_status_column(h))
    rows = []
    for index, record in enumerate(dataset):
        cells = []
        for i, col in enumerate(headers):
            value = record[col]
            style = classify(value).style_tag if i in status_cols else None
            cells.append(RenderCell(value, style))
        rows.append(RenderRow(index, tuple(cells)))
    return RenderTree(headers=headers, rows=tuple(rows), status_columns=status_cols)
