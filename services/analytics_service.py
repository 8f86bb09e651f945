"""
Best-effort analytics. Nothing here is allowed to raise into the caller.
"""
import logging
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger(__name__)

MEASUREMENT_PROTOCOL_URL = "https://www.google-analytics.com/mp/collect"


class AnalyticsSink(ABC):
    @abstractmethod
    def send(self, name: str, params: Dict[str, Any]) -> None:
        ...

    def close(self) -> None:
        pass


class LoggingAnalyticsSink(AnalyticsSink):
    def send(self, name, params):
        logger.info("analytics event | name=%s params=%s", name, params)


class MeasurementProtocolSink(AnalyticsSink):
    """Posts events to Google Analytics 4 from a single background worker."""

    def __init__(self, measurement_id: str, api_secret: str, client_id: str,
                 session: Optional[requests.Session] = None, timeout: float = 5.0,
                 executor: Optional[ThreadPoolExecutor] = None):
        self.measurement_id = measurement_id
        self.api_secret = api_secret
        self.client_id = client_id
        self.session = session or requests.Session()
        self.timeout = timeout
        self._executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="analytics")

    def payload(self, name: str, params: Dict[str, Any]) -> Dict[str, Any]:
        return {"client_id": self.client_id, "events": [{"name": name, "params": dict(params)}]}

    def send(self, name, params):
        future = self._executor.submit(self._post, self.payload(name, params))
        future.add_done_callback(_log_failure)

    def _post(self, payload):
        response = self.session.post(
            MEASUREMENT_PROTOCOL_URL,
            params={"measurement_id": self.measurement_id, "api_secret": self.api_secret},
            json=payload,
            timeout=self.timeout,
        )
        response.raise_for_status()

    def close(self):
        self._executor.shutdown(wait=False)


def _log_failure(future):
    exc = future.exception()
    if exc is not None:
        logger.debug("analytics delivery failed: %s", exc)


class AnalyticsTracker:
    """Wraps a sink so that a missing or broken sink never affects the app."""

    def __init__(self, sink: Optional[AnalyticsSink] = None):
        self.sink = sink

    def track(self, name: str, **params):
        if self.sink is None:
            return
        try:
            self.sink.send(name, params)
        except Exception as e:
            logger.debug("analytics event %s dropped: %s", name, e)

    def close(self):
        if self.sink is None:
            return
        try:
            self.sink.close()
        except Exception as e:
            logger.debug("analytics sink close failed: %s", e)


def build_sink(settings) -> AnalyticsSink:
    if settings.analytics_measurement_id and settings.analytics_api_secret:
        return MeasurementProtocolSink(
            measurement_id=settings.analytics_measurement_id,
            api_secret=settings.analytics_api_secret,
            client_id=settings.analytics_client_id,
        )
    return LoggingAnalyticsSink()
