import logging

from config.logging_config import setup_logging
from config.settings import get_settings
from controllers.app_controller import AppController
from services.analytics_service import AnalyticsTracker, build_sink
from services.export_service import ExportService
from services.fetch_service import SheetFetcher

logger = logging.getLogger(__name__)


def build_controller(settings) -> AppController:
    fetcher = SheetFetcher(
        settings.sheet_url,
        timeout=settings.request_timeout_seconds,
        cache_bust_param=settings.cache_bust_param,
    )
    exporter = ExportService(basename=settings.export_basename, title=settings.document_title)
    tracker = AnalyticsTracker(build_sink(settings))
    return AppController(fetcher, exporter=exporter, tracker=tracker)


def main():
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    logger.info("Starting product viewer | refresh every %ss", settings.refresh_interval_seconds)

    from ui.main_window import MainWindow

    window = MainWindow(
        build_controller(settings),
        refresh_interval_seconds=settings.refresh_interval_seconds,
        title=settings.document_title,
    )
    window.run()


if __name__ == "__main__":
    main()
