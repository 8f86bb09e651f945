import csv
import io
import logging
import re
from typing import Dict, List

from models.csv_model import Dataset

logger = logging.getLogger(__name__)


class CSVServiceError(Exception):
    pass


class CSVService:
    """
    Turns the published sheet export into a Dataset.
    - Tolerant of ragged rows: short rows are padded, long rows truncated.
    - Quoted fields may hold commas, newlines and doubled quotes.
    """

    # utf-8-sig also covers plain utf-8
    ENCODINGS = ['utf-8-sig', 'cp1252']
    LINE_BREAK = re.compile(r'\r\n|\r|\n')

    @staticmethod
    def decode(raw: bytes) -> str:
        for enc in CSVService.ENCODINGS:
            try:
                return raw.decode(enc)
            except UnicodeDecodeError:
                continue
        raise CSVServiceError("Could not decode sheet export with any known encoding.")

    @staticmethod
    def parse(text: str) -> Dataset:
        # 1. Keep only lines with content
        lines = [line for line in CSVService.LINE_BREAK.split(text or "") if line.strip()]
        if len(lines) < 2:
            logger.debug("Sheet export has %d usable line(s); treating as empty", len(lines))
            return Dataset.empty()

        # 2. Header: plain comma split, names trimmed
        headers = [h.strip() for h in lines[0].lstrip('\ufeff').split(',')]
        columns = list(dict.fromkeys(headers))

        # 3. Body: quote-aware reader over the remaining lines
        reader = csv.reader(io.StringIO("\n".join(lines[1:])), skipinitialspace=True)
        records: List[Dict[str, str]] = []
        try:
            for row in reader:
                values = [cell.strip() for cell in row]
                if len(values) < len(headers):
                    values += [""] * (len(headers) - len(values))
                record = {}
                for header, value in zip(headers, values):
                    record[header] = value
                records.append(record)
        except csv.Error as e:
            raise CSVServiceError(f"Malformed row near line {reader.line_num + 1}: {e}") from e

        return Dataset(columns=columns, records=records)
