"""
Google Sheets client — reads tabs and writes single rows back.

Token acquisition (service account JWT or OAuth consent) happens outside
this service; the client only needs a bearer token. Rows are located by
their ``id`` cell, never by a cached position.
"""
import logging
from urllib.parse import quote

import requests

import config


class SheetsError(Exception):
    """A spreadsheet request failed."""


def column_letter(index):
    """1-based column number to its A1 letters: 1 -> A, 27 -> AA."""
    letters = ""
    while index > 0:
        index, rem = divmod(index - 1, 26)
        letters = chr(ord("A") + rem) + letters
    return letters


def _text(value):
    return "" if value is None else str(value)


class SheetsClient:
    def __init__(self, spreadsheet_id, access_token, base_url=None, timeout=None, session=None):
        if not spreadsheet_id:
            raise SheetsError("spreadsheet id is not configured")
        if not access_token:
            raise SheetsError("access token is not configured")
        self.spreadsheet_id = spreadsheet_id
        self.access_token = access_token
        self.base_url = (base_url or config.SHEETS_API_BASE).rstrip("/")
        self.timeout = timeout or config.SHEETS_TIMEOUT
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls):
        return cls(config.SHEETS_ID, config.SHEETS_ACCESS_TOKEN)

    def _request(self, method, path, params=None, payload=None):
        url = f"{self.base_url}/{self.spreadsheet_id}{path}"
        try:
            r = self.session.request(
                method,
                url,
                headers={"Authorization": f"Bearer {self.access_token}"},
                params=params,
                json=payload,
                timeout=self.timeout
            )
        except requests.RequestException as e:
            raise SheetsError(f"{method} {path or '/'} failed: {e}") from e

        if r.status_code != 200:
            raise SheetsError(f"{method} {path or '/'} returned HTTP {r.status_code}: {r.text[:200]}")

        return r.json()

    # -----------------------------
    # Reads
    # -----------------------------

    def get_values(self, sheet):
        """Return the raw ``values`` grid of a tab (list of row lists)."""
        return self._request("GET", f"/values/{quote(sheet)}").get("values", [])

    def get_headers(self, sheet):
        data = self._request("GET", f"/values/{quote(sheet + '!1:1')}")
        values = data.get("values", [])
        return values[0] if values else []

    def read_sheet(self, sheet):
        """
        Return the tab as a list of dicts keyed by the header row.
        Cells missing at the end of a row become empty strings.
        """
        values = self.get_values(sheet)
        if len(values) < 2:
            return []

        headers, rows = values[0], values[1:]
        records = []
        for row in rows:
            padded = list(row) + [""] * (len(headers) - len(row))
            records.append({header: padded[i] or "" for i, header in enumerate(headers)})

        logging.info(f"Read {len(records)} rows from sheet {sheet}")
        return records

    def _locate(self, sheet, row_id):
        """Return ``(sheet_row_number, headers)`` for the row whose id matches, or None."""
        values = self.get_values(sheet)
        if not values or "id" not in values[0]:
            raise SheetsError(f"sheet {sheet!r} has no id column")

        headers = values[0]
        id_col = headers.index("id")
        for number, row in enumerate(values[1:], start=2):
            if len(row) > id_col and str(row[id_col]) == str(row_id):
                return number, headers
        return None

    def _sheet_id(self, sheet):
        data = self._request("GET", "", params={"fields": "sheets.properties"})
        for entry in data.get("sheets", []):
            props = entry.get("properties", {})
            if props.get("title") == sheet:
                return props.get("sheetId")
        raise SheetsError(f"sheet {sheet!r} not found")

    # -----------------------------
    # Writes
    # -----------------------------

    def append_row(self, sheet, row):
        """Append ``row`` (dict keyed by header) below the last row of the tab."""
        headers = self.get_headers(sheet)
        if not headers:
            raise SheetsError(f"no headers found for sheet {sheet!r}")

        self._request(
            "POST",
            f"/values/{quote(sheet)}:append",
            params={"valueInputOption": "RAW", "insertDataOption": "INSERT_ROWS"},
            payload={"values": [[_text(row.get(h)) for h in headers]]}
        )
        logging.info(f"Appended row {row.get('id')} to sheet {sheet}")

    def update_row(self, sheet, row_id, row):
        """Overwrite the row with ``id = row_id``. Returns False if the sheet has no such row."""
        found = self._locate(sheet, row_id)
        if found is None:
            return False

        number, headers = found
        cell_range = f"{sheet}!A{number}:{column_letter(len(headers))}{number}"
        self._request(
            "PUT",
            f"/values/{quote(cell_range)}",
            params={"valueInputOption": "RAW"},
            payload={"values": [[_text(row.get(h)) for h in headers]]}
        )
        logging.info(f"Updated row {row_id} in sheet {sheet}")
        return True

    def delete_row(self, sheet, row_id):
        """Remove the row with ``id = row_id``. Returns False if the sheet has no such row."""
        found = self._locate(sheet, row_id)
        if found is None:
            return False

        number, _ = found
        self._request("POST", ":batchUpdate", payload={
            "requests": [{
                "deleteDimension": {
                    "range": {
                        "sheetId": self._sheet_id(sheet),
                        "dimension": "ROWS",
                        "startIndex": number - 1,
                        "endIndex": number,
                    }
                }
            }]
        })
        logging.info(f"Deleted row {row_id} from sheet {sheet}")
        return True
