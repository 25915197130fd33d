from unittest.mock import patch, MagicMock

import pytest
import requests

from nps_dashboard.errors import FetchError, InvalidSourceError, SourceUnavailableError
from nps_dashboard.sheets import (
    build_export_url,
    fetch_csv,
    fetch_feedback,
    parse_csv,
    rows_to_records,
)
from tests.factories import HEADER, csv_row


class TestBuildExportUrl:

    def test_extracts_sheet_id_and_gid(self):
        url = "https://docs.google.com/spreadsheets/d/abc-123_X/edit?gid=557438093#gid=557438093"
        assert build_export_url(url) == (
            "https://docs.google.com/spreadsheets/d/abc-123_X/export?format=csv&gid=557438093"
        )

    def test_gid_defaults_to_zero(self):
        url = "https://docs.google.com/spreadsheets/d/abc123/edit"
        assert build_export_url(url).endswith("/d/abc123/export?format=csv&gid=0")

    def test_gid_after_ampersand(self):
        url = "https://docs.google.com/spreadsheets/d/abc123/edit?usp=sharing&gid=42"
        assert build_export_url(url).endswith("gid=42")

    def test_gid_after_question_mark_only_is_ignored(self):
        # only "#gid=" and "&gid=" count
        url = "https://docs.google.com/spreadsheets/d/abc123/edit?gid=7"
        assert build_export_url(url).endswith("gid=0")

    @pytest.mark.parametrize("url", ["", "https://example.com/sheet", "spreadsheets/d/"])
    def test_missing_sheet_id_raises(self, url):
        with pytest.raises(InvalidSourceError):
            build_export_url(url)


class TestParseCsv:

    def test_quoted_comma_stays_in_field(self):
        rows = parse_csv('a,"b,c",d')
        assert rows == [["a", "b,c", "d"]]

    def test_fields_are_trimmed_and_unquoted(self):
        rows = parse_csv(' a , "b" ,c ')
        assert rows == [["a", "b", "c"]]

    def test_blank_line_becomes_empty_row(self):
        rows = parse_csv("h1,h2\n\n1,2")
        assert rows == [["h1", "h2"], [], ["1", "2"]]

    def test_crlf_line_endings(self):
        rows = parse_csv("a,b\r\nc,d\r\n")
        assert rows == [["a", "b"], ["c", "d"]]

    def test_only_one_quote_removed_each_side(self):
        rows = parse_csv('"""quoted"""')
        assert rows == [['""quoted""']]

    def test_requoted_fields_parse_the_same(self):
        first = parse_csv('a,"b,c"')
        line = ",".join(f'"{f}"' for f in first[0])
        assert parse_csv(line) == first == [["a", "b,c"]]


class TestRowsToRecords:

    def test_maps_fixed_columns(self):
        rows = parse_csv(csv_row(why_us="Great prices", nps="10", what_better='"Faster, please"',
                                 wow_ideas="Gifts"))
        [record] = rows_to_records(rows)
        assert record.csat_service == 5
        assert record.csat_delivery == 4
        assert record.csat_platform == 3
        assert record.why_us == "Great prices"
        assert record.nps == 10
        assert record.what_better == "Faster, please"
        assert record.wow_ideas == "Gifts"
        assert record.date == "01/02/2024 10:00:00"

    def test_short_rows_are_dropped(self):
        rows = parse_csv(csv_row(extra_columns=8))  # 16 columns
        assert rows_to_records(rows) == []

    def test_empty_row_is_dropped(self):
        assert rows_to_records([[]]) == []

    def test_row_without_date_is_dropped(self):
        rows = parse_csv(csv_row(date=""))
        assert rows_to_records(rows) == []

    def test_unparsable_numbers_default_to_zero(self):
        rows = parse_csv(csv_row(service="", delivery="n/a", platform="4 - Good", nps="abc"))
        [record] = rows_to_records(rows)
        assert record.csat_service == 0
        assert record.csat_delivery == 0
        assert record.csat_platform == 4
        assert record.nps == 0


class TestFetch:

    def _response(self, status=200, text=""):
        response = MagicMock()
        response.ok = 200 <= status < 300
        response.status_code = status
        response.text = text
        return response

    @patch("nps_dashboard.sheets.requests.get")
    def test_fetch_csv_http_error_carries_status(self, mock_get):
        mock_get.return_value = self._response(status=404)
        with pytest.raises(FetchError) as exc:
            fetch_csv("https://example.com/export")
        assert exc.value.status == 404

    @patch("nps_dashboard.sheets.requests.get")
    def test_fetch_csv_transport_error(self, mock_get):
        mock_get.side_effect = requests.ConnectionError("boom")
        with pytest.raises(FetchError) as exc:
            fetch_csv("https://example.com/export")
        assert exc.value.status is None

    @patch("nps_dashboard.sheets.requests.get")
    def test_fetch_feedback_skips_header(self, mock_get):
        text = "\n".join([HEADER, csv_row(nps="9"), csv_row(nps="3")])
        mock_get.return_value = self._response(text=text)

        records = fetch_feedback("https://docs.google.com/spreadsheets/d/abc/edit#gid=5")

        assert [r.nps for r in records] == [9, 3]
        called_url = mock_get.call_args[0][0]
        assert called_url == "https://docs.google.com/spreadsheets/d/abc/export?format=csv&gid=5"

    @patch("nps_dashboard.sheets.requests.get")
    def test_fetch_feedback_collapses_http_failure(self, mock_get):
        mock_get.return_value = self._response(status=500)
        with pytest.raises(SourceUnavailableError) as exc:
            fetch_feedback("https://docs.google.com/spreadsheets/d/abc/edit")
        assert isinstance(exc.value.__cause__, FetchError)

    @patch("nps_dashboard.sheets.requests.get")
    def test_fetch_feedback_collapses_bad_url_without_request(self, mock_get):
        with pytest.raises(SourceUnavailableError) as exc:
            fetch_feedback("not a sheet url")
        assert isinstance(exc.value.__cause__, InvalidSourceError)
        mock_get.assert_not_called()
