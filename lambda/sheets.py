import logging

from google.oauth2 import service_account
from googleapiclient.discovery import build

from settings import Settings

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]

COMMENTS_RANGE = "Comments!A2:A"
USERS_RANGE = "Users!B2:C"
TASKS_RANGE = "Main!B:J"
TASK_ACTIVITY_RANGE = "Main!B2:D"
TASK_APPEND_RANGE = "Main!A1"


class SheetsGateway:
    """Range reads and row appends against one spreadsheet."""

    def __init__(self, settings: Settings):
        self.spreadsheet_id = settings.require_sheet_id()
        self.credentials = service_account.Credentials.from_service_account_info(
            settings.credentials_info(), scopes=SCOPES
        )

    def _values(self):
        # httplib2 is not thread-safe, so every call gets its own service.
        service = build("sheets", "v4", credentials=self.credentials, cache_discovery=False)
        return service.spreadsheets().values()

    def read_range(self, range_spec: str):
        resp = self._values().get(spreadsheetId=self.spreadsheet_id, range=range_spec).execute()
        rows = resp.get("values", [])
        logger.debug("read %s rows from %s", len(rows), range_spec)
        return rows

    def append_row(self, range_spec: str, row) -> None:
        self._values().append(
            spreadsheetId=self.spreadsheet_id,
            range=range_spec,
            valueInputOption="USER_ENTERED",
            insertDataOption="INSERT_ROWS",
            body={"values": [list(row)]},
        ).execute()
        logger.debug("appended 1 row to %s", range_spec)
