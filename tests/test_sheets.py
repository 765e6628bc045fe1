import gspread
import pytest

import sheets
from filters import apply_filters, clear_filters
from ingest import SAMPLE_ROWS, FetchResult, sync_to_sheet
from schema import COLUMNS
from sheets import GoogleSheetSink, _extract_sheet_key, open_worksheet


class FakeSpreadsheet:
    def __init__(self):
        self.batches = []

    def batch_update(self, body):
        self.batches.append(body)


class FakeWorksheet:
    def __init__(self, values=None):
        self.id = 42
        self.title = "COD Orders"
        self.values = values or []
        self.spreadsheet = FakeSpreadsheet()
        self.calls = []
        self.reads = 0

    def get_all_values(self):
        self.reads += 1
        return self.values

    def clear_basic_filter(self):
        self.calls.append("clear_basic_filter")

    def clear(self):
        self.calls.append("clear")
        self.values = []

    def update(self, range_name=None, values=None):
        self.calls.append(("update", range_name))
        self.values = values

    def format(self, ranges, fmt):
        self.calls.append(("format", ranges, fmt))

    def freeze(self, rows=None, cols=None):
        self.calls.append(("freeze", rows))


def test_extract_sheet_key():
    url = "https://docs.google.com/spreadsheets/d/1AbC-xyz_123/edit#gid=0"
    assert _extract_sheet_key(url) == "1AbC-xyz_123"
    assert _extract_sheet_key("1AbC-xyz_123") == "1AbC-xyz_123"
    assert _extract_sheet_key("") == ""


def test_write_table_bold_frozen_header():
    ws = FakeWorksheet()
    sink = GoogleSheetSink(ws)
    assert sync_to_sheet(FetchResult(rows=SAMPLE_ROWS), sink) == 2

    assert ws.values[0] == COLUMNS
    assert ws.values[1][0] == "#1001"
    assert len(ws.values) == 3
    assert ("format", "1:1", {"textFormat": {"bold": True}}) in ws.calls
    assert ("freeze", 1) in ws.calls
    assert ws.calls.index("clear_basic_filter") < ws.calls.index("clear")


def test_empty_result_still_writes_header():
    ws = FakeWorksheet()
    sync_to_sheet(FetchResult(), GoogleSheetSink(ws))
    assert ws.values == [COLUMNS]


def test_apply_filters_sends_text_contains_request():
    ws = FakeWorksheet(values=[COLUMNS, ["#1"] * 11, ["#2"] * 11])
    sink = GoogleSheetSink(ws)

    applied = apply_filters(sink, {"Country": "  Türkiye  ", "Order": "", "Status": "paid"})

    assert applied == 2
    assert ws.calls == ["clear_basic_filter"]
    request = ws.spreadsheet.batches[0]["requests"][0]["setBasicFilter"]["filter"]
    assert request["range"] == {
        "sheetId": 42,
        "startRowIndex": 0,
        "endRowIndex": 3,
        "startColumnIndex": 0,
        "endColumnIndex": 11,
    }
    specs = request["filterSpecs"]
    assert [s["columnIndex"] for s in specs] == [COLUMNS.index("Country"), COLUMNS.index("Status")]
    condition = specs[0]["filterCriteria"]["condition"]
    assert condition == {"type": "TEXT_CONTAINS", "values": [{"userEnteredValue": "Türkiye"}]}


def test_apply_filters_on_header_only_sheet_only_clears():
    ws = FakeWorksheet(values=[COLUMNS])
    assert apply_filters(GoogleSheetSink(ws), {"Country": "Türkiye"}) == 0
    assert ws.calls == ["clear_basic_filter"]
    assert ws.spreadsheet.batches == []


def test_clear_filters():
    ws = FakeWorksheet(values=[COLUMNS, ["#1"] * 11])
    clear_filters(GoogleSheetSink(ws))
    assert ws.calls == ["clear_basic_filter"]


class FakeClient:
    def __init__(self, error=None, worksheets=None):
        self.error = error
        self.worksheets = worksheets or {}
        self.added = []
        self.opened = None

    def open_by_key(self, key):
        self.opened = key
        if self.error:
            raise self.error
        return self

    def worksheet(self, title):
        if title not in self.worksheets:
            raise gspread.exceptions.WorksheetNotFound(title)
        return self.worksheets[title]

    def add_worksheet(self, title, rows, cols):
        self.added.append((title, rows, cols))
        return FakeWorksheet()


@pytest.fixture
def fake_gspread(monkeypatch):
    holder = {}

    def authorize(creds):
        return holder["client"]

    monkeypatch.setattr(sheets.Credentials, "from_service_account_file", lambda path, scopes: object())
    monkeypatch.setattr(sheets.gspread, "authorize", authorize)
    return holder


def test_open_worksheet_creates_missing_tab(fake_gspread):
    client = FakeClient()
    fake_gspread["client"] = client
    ws = open_worksheet("https://docs.google.com/spreadsheets/d/KEY123/edit", "COD Orders", "sa.json")
    assert isinstance(ws, FakeWorksheet)
    assert client.opened == "KEY123"
    assert client.added == [("COD Orders", 1000, 11)]


def test_open_worksheet_existing_tab(fake_gspread):
    existing = FakeWorksheet()
    client = FakeClient(worksheets={"COD Orders": existing})
    fake_gspread["client"] = client
    assert open_worksheet("KEY123", "COD Orders", "sa.json") is existing
    assert client.added == []


def test_open_worksheet_missing_spreadsheet(fake_gspread):
    fake_gspread["client"] = FakeClient(error=gspread.exceptions.SpreadsheetNotFound())
    with pytest.raises(RuntimeError, match="Spreadsheet not found"):
        open_worksheet("KEY123", "COD Orders", "sa.json")


def test_apply_filters_reads_sheet_once():
    ws = FakeWorksheet(values=[COLUMNS, ["#1"] * 11, ["#2"] * 11, ["#3"] * 11])
    apply_filters(GoogleSheetSink(ws), {"Status": "paid"})
    assert ws.reads == 1
    request = ws.spreadsheet.batches[0]["requests"][0]["setBasicFilter"]["filter"]
    assert request["range"]["endRowIndex"] == 4
