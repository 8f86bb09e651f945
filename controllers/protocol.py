"""
What the controller needs from a view. The tkinter window implements it;
tests use an in-memory recorder.
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List

from controllers.table_renderer import RenderTree
from services.export_service import ExportArtifact


class ViewPort(ABC):
    @abstractmethod
    def show_loading(self) -> None:
        ...

    @abstractmethod
    def show_table(self, tree: RenderTree) -> None:
        """Replace whatever is in the table container with this tree."""
        ...

    @abstractmethod
    def show_error(self, message: str) -> None:
        """Inline message in the table area; the previous rows stay available."""
        ...

    @abstractmethod
    def apply_visibility(self, mask: List[bool]) -> None:
        ...

    @abstractmethod
    def update_result_count(self, text: str) -> None:
        ...

    @abstractmethod
    def update_last_updated(self, when: datetime) -> None:
        ...

    @abstractmethod
    def reset_search(self) -> None:
        """Empty the search input without emitting a new search."""
        ...

    @abstractmethod
    def set_export_menu_open(self, is_open: bool) -> None:
        ...

    @abstractmethod
    def offer_download(self, artifact: ExportArtifact) -> None:
        ...

    @abstractmethod
    def alert(self, title: str, message: str) -> None:
        """Blocking, user-facing error."""
        ...


class NullView(ViewPort):
    """Used until a real view attaches itself."""

    def show_loading(self):
        pass

    def show_table(self, tree):
        pass

    def show_error(self, message):
        pass

    def apply_visibility(self, mask):
        pass

    def update_result_count(self, text):
        pass

    def update_last_updated(self, when):
        pass

    def reset_search(self):
        pass

    def set_export_menu_open(self, is_open):
        pass

    def offer_download(self, artifact):
        pass

    def alert(self, title, message):
        pass
