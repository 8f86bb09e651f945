"""Tests for status classification and table rendering."""

import pytest

from controllers.table_renderer import EMPTY_MESSAGE, render_table
from models.csv_model import Dataset
from services.status_service import StatusCategory, classify, is_status_column


class TestClassify:
    @pytest.mark.parametrize("value,expected", [
        ("In Stock", StatusCategory.AVAILABLE),
        ("AVAILABLE now", StatusCategory.AVAILABLE),
        ("Limited Qty", StatusCategory.LOW),
        ("low", StatusCategory.LOW),
        ("Sold Out", StatusCategory.OUT),
        ("out of stock", StatusCategory.OUT),
        ("", StatusCategory.NONE),
        ("Discontinued", StatusCategory.NONE),
    ])
    def test_keywords(self, value, expected):
        assert classify(value) == expected

    def test_available_checked_before_out(self):
        # "available" wins even though "out" would also match
        assert classify("Available without delay") == StatusCategory.AVAILABLE

    def test_low_checked_before_sold(self):
        assert classify("Limited, almost sold") == StatusCategory.LOW

    def test_style_tags(self):
        assert StatusCategory.AVAILABLE.style_tag == "status-available"
        assert StatusCategory.NONE.style_tag is None


class TestStatusColumn:
    def test_matches_case_insensitively(self):
        assert is_status_column("Stock Status")
        assert is_status_column("STATUS")
        assert not is_status_column("Stock")


class TestRenderTable:
    def test_empty_dataset_renders_placeholder(self):
        tree = render_table(Dataset.empty())
        assert tree.is_placeholder
        assert tree.placeholder == EMPTY_MESSAGE
        assert tree.rows == ()

    def test_headers_and_rows_in_order(self, sample_dataset):
        tree = render_table(sample_dataset)
        assert tree.headers == ("Product", "SKU", "Price", "Stock Status")
        assert len(tree.rows) == 4
        assert [c.text for c in tree.rows[1].cells] == ["Acme, Inc. Bolt", "B-002", "0.40", "Limited Qty"]
        assert [r.index for r in tree.rows] == [0, 1, 2, 3]

    def test_only_status_columns_are_styled(self, sample_dataset):
        tree = render_table(sample_dataset)
        assert tree.status_columns == (3,)
        styles = [row.cells[3].style for row in tree.rows]
        assert styles == ["status-available", "status-low", "status-out", None]
        for row in tree.rows:
            assert all(cell.style is None for cell in row.cells[:3])

    def test_status_words_outside_status_column_are_plain(self):
        dataset = Dataset(columns=["Name"], records=[{"Name": "Sold Out Special"}])
        tree = render_table(dataset)
        assert tree.rows[0].cells[0].style is None
