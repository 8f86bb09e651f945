from datetime import datetime

import pytest

from controllers.app_controller import AppController
from controllers.protocol import ViewPort
from services.analytics_service import AnalyticsSink, AnalyticsTracker
from services.csv_service import CSVService
from services.export_service import ExportService

FIXED_NOW = datetime(2024, 3, 15, 9, 30, 0)

SAMPLE_CSV = (
    "Product, SKU, Price, Stock Status\n"
    "Red Widget,W-001,12.50,In Stock\n"
    '"Acme, Inc. Bolt",B-002,0.40,Limited Qty\n'
    "Blue Gear,G-003,7.00,Sold Out\n"
    "Green Nut,N-004,0.10,\n"
)


class FakeFetcher:
    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = 0

    def fetch_text(self):
        self.calls += 1
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


class RecordingView(ViewPort):
    def __init__(self):
        self.events = []
        self.tree = None
        self.mask = None
        self.count_text = None
        self.last_updated = None
        self.menu_open = False
        self.downloads = []
        self.alerts = []
        self.errors = []

    def show_loading(self):
        self.events.append("loading")

    def show_table(self, tree):
        self.events.append("table")
        self.tree = tree

    def show_error(self, message):
        self.events.append("error")
        self.errors.append(message)

    def apply_visibility(self, mask):
        self.mask = mask

    def update_result_count(self, text):
        self.count_text = text

    def update_last_updated(self, when):
        self.last_updated = when

    def reset_search(self):
        self.events.append("reset_search")

    def set_export_menu_open(self, is_open):
        self.menu_open = is_open

    def offer_download(self, artifact):
        self.downloads.append(artifact)

    def alert(self, title, message):
        self.alerts.append((title, message))


class RecordingSink(AnalyticsSink):
    def __init__(self):
        self.events = []
        self.closed = False

    def send(self, name, params):
        self.events.append((name, params))

    def close(self):
        self.closed = True


@pytest.fixture
def sample_dataset():
    return CSVService.parse(SAMPLE_CSV)


@pytest.fixture
def exporter():
    return ExportService(clock=lambda: FIXED_NOW)


@pytest.fixture
def view():
    return RecordingView()


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def make_controller(view, sink, exporter):
    def _make(*responses):
        fetcher = FakeFetcher(*responses)
        return AppController(
            fetcher,
            exporter=exporter,
            tracker=AnalyticsTracker(sink),
            view=view,
            clock=lambda: FIXED_NOW,
        )
    return _make
