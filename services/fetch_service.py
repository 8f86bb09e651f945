import logging
import time
from typing import Callable, Optional

import requests

from services.csv_service import CSVService

logger = logging.getLogger(__name__)


class FetchError(Exception):
    pass


class SheetFetcher:
    """
    Downloads the published sheet as CSV text.
    Every request carries a fresh timestamp parameter so proxies and the
    sheet publisher never hand back a cached copy.
    """

    def __init__(self, url: str, timeout: float = 15.0, cache_bust_param: str = "t",
                 session: Optional[requests.Session] = None,
                 clock: Callable[[], float] = time.time):
        self.url = url
        self.timeout = timeout
        self.cache_bust_param = cache_bust_param
        self.session = session or requests.Session()
        self._clock = clock

    def cache_bust_value(self) -> str:
        return str(int(self._clock() * 1000))

    def fetch_text(self) -> str:
        params = {self.cache_bust_param: self.cache_bust_value()}
        logger.info("Fetching sheet export | url=%s", self.url)
        try:
            response = self.session.get(self.url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise FetchError(f"Transport error while fetching sheet: {e}") from e

        if not 200 <= response.status_code < 300:
            raise FetchError(f"Sheet request failed with status {response.status_code}")

        logger.debug("Sheet export received | bytes=%d", len(response.content))
        return CSVService.decode(response.content)
