from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from models.csv_model import Dataset


class ExportFormat(str, Enum):
    CSV = "csv"
    XLSX = "xlsx"
    PDF = "pdf"

    @property
    def extension(self) -> str:
        return self.value


class ExportMenuState(str, Enum):
    CLOSED = "closed"
    OPEN = "open"


@dataclass
class FilterState:
    term: str = ""
    visible_count: int = 0
    total_count: int = 0

    def reset(self, total: int = 0):
        self.term = ""
        self.visible_count = total
        self.total_count = total


@dataclass
class SessionState:
    """Everything one application session owns. Only the controller writes to it."""
    dataset: Dataset = field(default_factory=Dataset.empty)
    filter: FilterState = field(default_factory=FilterState)
    last_updated: Optional[datetime] = None
    refresh_sequence: int = 0
    export_menu: ExportMenuState = ExportMenuState.CLOSED


# =========================================================================
#  COMMANDS
# =========================================================================
@dataclass(frozen=True)
class Refresh:
    pass


@dataclass(frozen=True)
class SetFilter:
    term: str


@dataclass(frozen=True)
class ClearFilter:
    pass


@dataclass(frozen=True)
class Export:
    format: ExportFormat


@dataclass(frozen=True)
class ToggleExportMenu:
    pass


@dataclass(frozen=True)
class DismissExportMenu:
    pass
