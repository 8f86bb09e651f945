"""Tests for the sheet export parser."""

import pytest

from models.csv_model import Dataset
from services.csv_service import CSVService, CSVServiceError


class TestParseDegenerate:
    @pytest.mark.parametrize("text", ["", "OnlyHeader", "   \n\n  \t\n", "a,b,c\n   \n"])
    def test_no_data_lines_gives_empty_dataset(self, text):
        dataset = CSVService.parse(text)
        assert len(dataset) == 0
        assert not dataset

    def test_none_is_treated_as_empty(self):
        assert len(CSVService.parse(None)) == 0


class TestParseRecords:
    def test_one_record_per_data_line(self):
        text = " Name , Colour ,Qty\nbolt,red,3\nnut,blue,4\n"
        dataset = CSVService.parse(text)
        assert len(dataset) == 2
        assert dataset.columns == ("Name", "Colour", "Qty")
        for record in dataset:
            assert set(record) == {"Name", "Colour", "Qty"}
        assert dataset[0] == {"Name": "bolt", "Colour": "red", "Qty": "3"}

    def test_blank_lines_are_skipped(self):
        dataset = CSVService.parse("\n\nA,B\n\n1,2\n   \n3,4\n")
        assert dataset.rows() == [["1", "2"], ["3", "4"]]

    def test_crlf_line_endings(self):
        dataset = CSVService.parse("A,B\r\n1,2\r\n")
        assert dataset.rows() == [["1", "2"]]

    def test_values_are_trimmed_and_kept_as_strings(self):
        dataset = CSVService.parse("A,B\n  007 ,  1.50  \n")
        assert dataset[0] == {"A": "007", "B": "1.50"}

    def test_byte_order_mark_is_dropped_from_first_header(self):
        dataset = CSVService.parse("\ufeffName,Qty\nbolt,1\n")
        assert dataset.columns == ("Name", "Qty")

    def test_row_order_preserved(self):
        dataset = CSVService.parse("N\n3\n1\n2\n")
        assert [r["N"] for r in dataset] == ["3", "1", "2"]


class TestQuotedFields:
    def test_embedded_comma(self):
        dataset = CSVService.parse('Vendor,Qty\n"Acme, Inc.",5\n')
        assert dataset[0]["Vendor"] == "Acme, Inc."
        assert dataset[0]["Qty"] == "5"

    def test_doubled_quote_decodes_to_literal_quote(self):
        dataset = CSVService.parse('Item,Qty\n"5"" pipe, steel",2\n')
        assert dataset[0]["Item"] == '5" pipe, steel'

    def test_quoted_field_with_surrounding_spaces(self):
        dataset = CSVService.parse('A,B\n1,  "  x, y  "  \n')
        assert dataset[0]["B"] == "x, y"

    def test_unicode_line_separators_stay_inside_cells(self):
        dataset = CSVService.parse("Name,Note\nbolt,a\u2028b\u0085c\x0cd\n")
        assert dataset.rows() == [["bolt", "a\u2028b\u0085c\x0cd"]]

    def test_embedded_newline(self):
        dataset = CSVService.parse('Item,Note\nbolt,"line one\nline two"\nnut,plain\n')
        assert len(dataset) == 2
        assert dataset[0]["Note"] == "line one\nline two"
        assert dataset[1]["Item"] == "nut"


class TestColumnMismatch:
    def test_short_rows_are_padded(self):
        dataset = CSVService.parse("A,B,C\n1\n")
        assert dataset[0] == {"A": "1", "B": "", "C": ""}

    def test_extra_fields_are_ignored(self):
        dataset = CSVService.parse("A,B\n1,2,3,4\n")
        assert dataset[0] == {"A": "1", "B": "2"}

    def test_duplicate_headers_last_value_wins(self):
        dataset = CSVService.parse("Name,Price,Name\nfirst,1,second\n")
        assert dataset.columns == ("Name", "Price")
        assert dataset[0] == {"Name": "second", "Price": "1"}


class TestDecode:
    def test_utf8_with_bom(self):
        assert CSVService.decode("\ufeffA,B\n".encode("utf-8")) == "A,B\n"

    def test_plain_utf8(self):
        assert CSVService.decode("Señal".encode("utf-8")) == "Señal"

    def test_cp1252_fallback(self):
        text = "Señal “quoted”"
        assert CSVService.decode(text.encode("cp1252")) == text

    def test_undecodable_bytes_raise(self):
        with pytest.raises(CSVServiceError):
            CSVService.decode(b"\xff\x81\xfe")


class TestDatasetModel:
    def test_rejects_record_with_wrong_keys(self):
        with pytest.raises(ValueError):
            Dataset(columns=["A", "B"], records=[{"A": "1"}])

    def test_records_are_copied(self):
        source = {"A": "1"}
        dataset = Dataset(columns=["A"], records=[source])
        source["A"] = "changed"
        assert dataset[0]["A"] == "1"
