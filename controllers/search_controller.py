import logging
from typing import List, Optional

from models.csv_model import Dataset
from models.session_model import FilterState
from services.analytics_service import AnalyticsTracker

logger = logging.getLogger(__name__)


class SearchController:
    """
    Substring filter over the rows of the current dataset.
    Row i of the mask always refers to dataset[i]; bind() rebuilds the
    searchable text whenever the dataset is swapped.
    """

    def __init__(self, state: Optional[FilterState] = None, tracker: Optional[AnalyticsTracker] = None):
        self.state = state or FilterState()
        self.tracker = tracker or AnalyticsTracker()
        self._haystacks: List[str] = []
        self._mask: List[bool] = []

    def bind(self, dataset: Dataset):
        self._haystacks = [" ".join(record.values()).lower() for record in dataset]
        self.state.reset(len(self._haystacks))
        self._mask = [True] * len(self._haystacks)

    def set_filter_term(self, term: str) -> List[bool]:
        self.state.term = term or ""
        self.tracker.track("search", search_term=self.state.term)
        return self._apply()

    def clear_filter(self) -> List[bool]:
        self.state.term = ""
        return self._apply()

    def _apply(self) -> List[bool]:
        needle = self.state.term.lower()
        self._mask = [needle in text for text in self._haystacks]
        self.state.visible_count = sum(self._mask)
        self.state.total_count = len(self._haystacks)
        logger.debug("Filter %r matches %d/%d rows", self.state.term,
                     self.state.visible_count, self.state.total_count)
        return list(self._mask)

    @property
    def mask(self) -> List[bool]:
        return list(self._mask)

    @property
    def visible_count(self) -> int:
        return self.state.visible_count

    @property
    def total_count(self) -> int:
        return self.state.total_count

    def summary(self) -> str:
        if not self.state.term:
            return f"Showing all {self.total_count} products"
        return f"Showing {self.visible_count} of {self.total_count} products"
