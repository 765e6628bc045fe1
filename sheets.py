# sheets.py
"""
Google Sheets sink for the order table.

The worksheet holds a bold, frozen header row followed by one row per order.
Filtering uses the sheet's basic filter with one TEXT_CONTAINS condition per
column, so the user sees the same filter buttons they would set by hand.
"""

import logging
import re
from typing import Mapping, Sequence

import gspread
from google.oauth2.service_account import Credentials

from schema import COLUMNS

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]


def _extract_sheet_key(raw: str) -> str:
    if not raw:
        return ""
    s = str(raw).strip()
    m = re.search(r"/d/([a-zA-Z0-9-_]+)", s)
    if m:
        return m.group(1)
    return s.strip("/")


class GoogleSheetSink:
    def __init__(self, worksheet, columns: Sequence[str] = COLUMNS):
        self.ws = worksheet
        self.columns = list(columns)

    def row_count(self) -> int:
        return len(self.ws.get_all_values())

    def write_table(self, header: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
        values = [list(header)] + [list(r) for r in rows]
        # drop any filter first; clearing cells under an active filter leaves hidden rows
        self.ws.clear_basic_filter()
        self.ws.clear()
        self.ws.update(range_name="A1", values=values)
        self.ws.format("1:1", {"textFormat": {"bold": True}})
        self.ws.freeze(rows=1)
        logging.info("Wrote %d rows to worksheet '%s'", len(rows), self.ws.title)

    def remove_filter(self) -> None:
        self.ws.clear_basic_filter()

    def _filter_request(self, criteria: Mapping[int, str], row_count: int) -> dict:
        return {
            "setBasicFilter": {
                "filter": {
                    "range": {
                        "sheetId": self.ws.id,
                        "startRowIndex": 0,
                        "endRowIndex": row_count,
                        "startColumnIndex": 0,
                        "endColumnIndex": len(self.columns),
                    },
                    "filterSpecs": [
                        {
                            "columnIndex": idx,
                            "filterCriteria": {
                                "condition": {
                                    "type": "TEXT_CONTAINS",
                                    "values": [{"userEnteredValue": text}],
                                }
                            },
                        }
                        for idx, text in sorted(criteria.items())
                    ],
                }
            }
        }

    def set_text_filters(self, criteria: Mapping[int, str], row_count: int) -> None:
        self.ws.spreadsheet.batch_update({"requests": [self._filter_request(criteria, row_count)]})
        logging.info("Applied filters on worksheet '%s': %s",
                     self.ws.title, {self.columns[i]: t for i, t in criteria.items()})


def open_worksheet(doc_id: str, tab: str, creds_file: str, columns: Sequence[str] = COLUMNS):
    """Open `tab` in the spreadsheet, creating the worksheet if it does not exist yet."""
    creds = Credentials.from_service_account_file(creds_file, scopes=SCOPES)
    gc = gspread.authorize(creds)

    key = _extract_sheet_key(str(doc_id or ""))
    try:
        sh = gc.open_by_key(key)
    except gspread.exceptions.SpreadsheetNotFound:
        raise RuntimeError("Spreadsheet not found. Confirm GOOGLE_SHEETS_DOC_ID and that the service account has Editor access.")
    except gspread.exceptions.APIError as e:
        raise RuntimeError("Sheets API error: ensure the ID points to a Google Sheet and the service account is shared with it.") from e

    try:
        return sh.worksheet(tab)
    except gspread.exceptions.WorksheetNotFound:
        logging.info("Worksheet '%s' not found, creating it", tab)
        return sh.add_worksheet(title=tab, rows=1000, cols=len(columns))


def open_sheet_sink(doc_id: str, tab: str, creds_file: str, columns: Sequence[str] = COLUMNS) -> GoogleSheetSink:
    return GoogleSheetSink(open_worksheet(doc_id, tab, creds_file, columns), columns)
