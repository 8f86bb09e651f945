import logging
from datetime import datetime
from typing import Callable, Optional, Tuple

from controllers.export_menu import ExportMenu
from controllers.protocol import NullView, ViewPort
from controllers.search_controller import SearchController
from controllers.table_renderer import render_table
from models.csv_model import Dataset
from models.session_model import (ClearFilter, DismissExportMenu, Export, ExportFormat,
                                  Refresh, SessionState, SetFilter, ToggleExportMenu)
from services.analytics_service import AnalyticsTracker
from services.csv_service import CSVService, CSVServiceError
from services.export_service import ExportArtifact, ExportSerializationError, ExportService
from services.fetch_service import FetchError, SheetFetcher

logger = logging.getLogger(__name__)

LOAD_ERROR_MESSAGE = "Error loading data. Please refresh or try later."


class AppController:
    """
    Owns the session state and is the only place that changes it.
    User actions arrive as commands through dispatch(); refreshes are tagged
    with a sequence number and only the latest one may land.
    """

    def __init__(self, fetcher: SheetFetcher, exporter: Optional[ExportService] = None,
                 tracker: Optional[AnalyticsTracker] = None, view: Optional[ViewPort] = None,
                 clock: Callable[[], datetime] = datetime.now):
        self.session = SessionState()
        self.fetcher = fetcher
        self.exporter = exporter or ExportService()
        self.tracker = tracker or AnalyticsTracker()
        self.view: ViewPort = view or NullView()
        self.search = SearchController(self.session.filter, self.tracker)
        self.export_menu = ExportMenu()
        self._clock = clock

    def attach_view(self, view: ViewPort):
        self.view = view

    @property
    def dataset(self) -> Dataset:
        return self.session.dataset

    def dispatch(self, command):
        if isinstance(command, Refresh):
            return self.refresh()
        if isinstance(command, SetFilter):
            return self.set_filter(command.term)
        if isinstance(command, ClearFilter):
            return self.clear_filter()
        if isinstance(command, Export):
            return self.export(command.format)
        if isinstance(command, ToggleExportMenu):
            return self.toggle_export_menu()
        if isinstance(command, DismissExportMenu):
            return self.dismiss_export_menu()
        raise TypeError(f"Unknown command: {command!r}")

    def view_loaded(self):
        self.tracker.track("page_view")

    def shutdown(self):
        self.tracker.close()

    # =========================================================================
    #  REFRESH
    # =========================================================================
    def refresh(self) -> bool:
        """Fetch and apply in one go. The UI splits this across a worker thread."""
        seq = self.begin_refresh()
        text, error = self.fetch(seq)
        if error is not None:
            return self.fail_refresh(seq, error)
        return self.complete_refresh(seq, text)

    def fetch(self, seq: int) -> Tuple[Optional[str], Optional[Exception]]:
        """Safe to call from a worker thread. Returns (text, None) or (None, error), never raises."""
        try:
            return self.fetcher.fetch_text(), None
        except (FetchError, CSVServiceError) as e:
            return None, e
        except Exception as e:
            logger.exception("Refresh #%d crashed while fetching", seq)
            return None, e

    def begin_refresh(self) -> int:
        self.session.refresh_sequence += 1
        seq = self.session.refresh_sequence
        logger.info("Refresh #%d started", seq)
        self.view.show_loading()
        return seq

    def is_current(self, seq: int) -> bool:
        return seq == self.session.refresh_sequence

    def complete_refresh(self, seq: int, text: str) -> bool:
        if not self.is_current(seq):
            logger.info("Refresh #%d superseded by #%d; response dropped", seq, self.session.refresh_sequence)
            return False
        try:
            dataset = CSVService.parse(text)
        except CSVServiceError as e:
            return self.fail_refresh(seq, e)
        self._replace_dataset(dataset)
        logger.info("Refresh #%d applied | rows=%d columns=%d", seq, len(dataset), len(dataset.columns))
        return True

    def fail_refresh(self, seq: int, error: Exception) -> bool:
        if not self.is_current(seq):
            logger.info("Refresh #%d failed after being superseded: %s", seq, error)
            return False
        logger.error("Refresh #%d failed: %s", seq, error)
        self.view.show_error(LOAD_ERROR_MESSAGE)
        return False

    def _replace_dataset(self, dataset: Dataset):
        self.session.dataset = dataset
        self.session.last_updated = self._clock()
        self.search.bind(dataset)
        self.view.reset_search()
        self.view.show_table(render_table(dataset))
        self.view.update_result_count(self.search.summary())
        self.view.update_last_updated(self.session.last_updated)

    # =========================================================================
    #  SEARCH
    # =========================================================================
    def set_filter(self, term: str):
        mask = self.search.set_filter_term(term)
        self.view.apply_visibility(mask)
        self.view.update_result_count(self.search.summary())

    def clear_filter(self):
        mask = self.search.clear_filter()
        self.view.reset_search()
        self.view.apply_visibility(mask)
        self.view.update_result_count(self.search.summary())

    # =========================================================================
    #  EXPORT
    # =========================================================================
    def toggle_export_menu(self):
        self.session.export_menu = self.export_menu.toggle()
        self.view.set_export_menu_open(self.export_menu.is_open)

    def dismiss_export_menu(self):
        self.session.export_menu = self.export_menu.close()
        self.view.set_export_menu_open(False)

    def export(self, fmt: ExportFormat) -> Optional[ExportArtifact]:
        self.dismiss_export_menu()
        try:
            artifact = self.exporter.export(self.session.dataset, ExportFormat(fmt))
        except ExportSerializationError as e:
            self.view.alert("Export failed", str(e))
            return None
        if artifact is not None:
            self.view.offer_download(artifact)
        return artifact
