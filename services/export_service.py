import io
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterator, List, Optional

import pandas as pd
from matplotlib.backends.backend_pdf import PdfPages
from matplotlib.figure import Figure
from matplotlib.patches import Rectangle

from models.csv_model import Dataset
from models.session_model import ExportFormat

logger = logging.getLogger(__name__)

SHEET_NAME = "Products"

MEDIA_TYPES = {
    ExportFormat.CSV: "text/csv",
    ExportFormat.XLSX: "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ExportFormat.PDF: "application/pdf",
}

# PDF layout, in inches (A4 landscape)
PAGE_SIZE = (11.69, 8.27)
MARGIN = 0.5
TITLE_BLOCK = 0.9
FOOTER_BLOCK = 0.4
ROW_HEIGHT = 0.28
FONT_SIZE = 7
MIN_COLUMN_CHARS = 6
MAX_COLUMN_CHARS = 32
HEADER_FILL = "#1f4e79"
SHADE_FILL = "#eef2f7"
GRID_COLOR = "#c8ced6"


class ExportSerializationError(Exception):
    pass


@dataclass(frozen=True)
class ExportArtifact:
    filename: str
    content: bytes
    media_type: str


def escape_csv_value(value: str) -> str:
    if any(ch in value for ch in (',', '"', '\n', '\r')):
        return '"' + value.replace('"', '""') + '"'
    return value


def column_widths(dataset: Dataset) -> List[int]:
    """Character width per column: longest of header and cells, clamped."""
    widths = []
    for col in dataset.columns:
        longest = max([len(col)] + [len(r[col]) for r in dataset.records])
        widths.append(max(MIN_COLUMN_CHARS, min(MAX_COLUMN_CHARS, longest)))
    return widths


def rows_per_page(first_page: bool) -> int:
    top = PAGE_SIZE[1] - MARGIN - (TITLE_BLOCK if first_page else 0.0)
    bottom = MARGIN + FOOTER_BLOCK
    # one slot goes to the repeated header row
    return max(1, int((top - bottom) // ROW_HEIGHT) - 1)


def paginate(row_count: int) -> List[range]:
    pages = []
    start = 0
    first = True
    while start < row_count or first:
        size = rows_per_page(first)
        pages.append(range(start, min(start + size, row_count)))
        start += size
        first = False
    return pages


def _fit(text: str, chars: int) -> str:
    if len(text) <= chars:
        return text
    return text[:max(chars - 1, 1)] + "…"


class ExportService:
    def __init__(self, basename: str = "vadimpex-products", title: str = "Vadimpex Products",
                 clock: Callable[[], datetime] = datetime.now):
        self.basename = basename
        self.title = title
        self._clock = clock

    def filename(self, fmt: ExportFormat) -> str:
        return f"{self.basename}-{self._clock():%Y-%m-%d}.{fmt.extension}"

    def export(self, dataset: Dataset, fmt: ExportFormat) -> Optional[ExportArtifact]:
        if not dataset:
            logger.info("Export skipped: dataset is empty")
            return None
        if fmt is ExportFormat.CSV:
            content = self.to_csv(dataset)
        elif fmt is ExportFormat.XLSX:
            content = self.to_xlsx(dataset)
        elif fmt is ExportFormat.PDF:
            content = self.to_pdf(dataset)
        else:
            raise ValueError(f"Unsupported export format: {fmt}")
        artifact = ExportArtifact(self.filename(fmt), content, MEDIA_TYPES[fmt])
        logger.info("Export ready | file=%s bytes=%d", artifact.filename, len(content))
        return artifact

    # ========================================================
    #  CSV
    # ========================================================
    def to_csv(self, dataset: Dataset) -> bytes:
        lines = [",".join(escape_csv_value(c) for c in dataset.columns)]
        for row in dataset.rows():
            lines.append(",".join(escape_csv_value(v) for v in row))
        return ("\n".join(lines) + "\n").encode("utf-8")

    # ========================================================
    #  EXCEL
    # ========================================================
    def to_xlsx(self, dataset: Dataset) -> bytes:
        try:
            df = pd.DataFrame(dataset.rows(), columns=list(dataset.columns))
            buf = io.BytesIO()
            with pd.ExcelWriter(buf, engine='openpyxl') as writer:
                df.to_excel(writer, sheet_name=SHEET_NAME, index=False)
                sheet = writer.sheets[SHEET_NAME]
                sheet.freeze_panes = "A2"
                # openpyxl reads a leading "=" as a formula; sheet values are always text
                for row in sheet.iter_rows():
                    for cell in row:
                        if isinstance(cell.value, str) and cell.value.startswith("="):
                            cell.data_type = "s"
                for column in sheet.columns:
                    cells = [cell for cell in column]
                    max_length = max(len(str(cell.value or "")) for cell in cells)
                    sheet.column_dimensions[cells[0].column_letter].width = max_length + 2
            return buf.getvalue()
        except Exception as e:
            logger.error("Workbook export failed: %s", e)
            raise ExportSerializationError(f"Could not build the Excel workbook: {e}") from e

    # ========================================================
    #  PDF
    # ========================================================
    def to_pdf(self, dataset: Dataset) -> bytes:
        try:
            buf = io.BytesIO()
            with PdfPages(buf, metadata={"Title": self.title}) as pdf:
                for fig in self.pdf_pages(dataset):
                    pdf.savefig(fig)
            return buf.getvalue()
        except Exception as e:
            logger.error("PDF export failed: %s", e)
            raise ExportSerializationError(f"Could not build the PDF document: {e}") from e

    def pdf_pages(self, dataset: Dataset) -> Iterator[Figure]:
        """One figure per page; the generation time is read once for the whole document."""
        generated = self._clock()
        widths = column_widths(dataset)
        table_width = PAGE_SIZE[0] - 2 * MARGIN
        col_inches = [table_width * w / sum(widths) for w in widths]
        char_inches = FONT_SIZE * 0.6 / 72
        col_chars = [max(1, int((w - 0.1) / char_inches)) for w in col_inches]
        rows = dataset.rows()
        pages = paginate(len(rows))
        for number, page_rows in enumerate(pages, start=1):
            yield self._draw_page(
                dataset.columns, [rows[i] for i in page_rows], page_rows.start,
                col_inches, col_chars, number, len(pages), generated,
            )

    def _draw_page(self, columns, rows, first_index, col_inches, col_chars, number, total, generated):
        width, height = PAGE_SIZE
        fig = Figure(figsize=PAGE_SIZE)
        ax = fig.add_axes([0, 0, 1, 1])
        ax.set_xlim(0, width)
        ax.set_ylim(0, height)
        ax.axis("off")

        top = height - MARGIN
        if number == 1:
            ax.text(MARGIN, top - 0.3, self.title, fontsize=16, fontweight="bold", va="center",
                    parse_math=False)
            ax.text(MARGIN, top - 0.65, f"Generated: {generated:%Y-%m-%d %H:%M}",
                    fontsize=9, color="#555555", va="center")
            top -= TITLE_BLOCK

        def draw_row(y, values, fill, color, weight):
            x = MARGIN
            for value, w, chars in zip(values, col_inches, col_chars):
                ax.add_patch(Rectangle((x, y - ROW_HEIGHT), w, ROW_HEIGHT,
                                       facecolor=fill, edgecolor=GRID_COLOR, linewidth=0.4))
                ax.text(x + 0.05, y - ROW_HEIGHT / 2, _fit(value, chars), fontsize=FONT_SIZE,
                        color=color, fontweight=weight, va="center", ha="left", parse_math=False)
                x += w

        draw_row(top, columns, HEADER_FILL, "white", "bold")
        y = top - ROW_HEIGHT
        for offset, row in enumerate(rows):
            shaded = (first_index + offset) % 2 == 1
            draw_row(y, row, SHADE_FILL if shaded else "white", "#111111", "normal")
            y -= ROW_HEIGHT

        ax.text(width / 2, MARGIN, f"Page {number} of {total}", fontsize=8,
                color="#555555", ha="center", va="center")
        return fig
