"""
Google Sheets access for the remote weekly summary table.
"""

import logging
from typing import Any, Dict, List, Optional

import google.auth
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from labor_cost.services.retry_handler import RetryHandler
from labor_cost.utils.logging_utils import sanitize_sensitive_data

logger = logging.getLogger(__name__)

SHEETS_SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]


class GoogleSheetsService:
    """
    Thin Google Sheets client with retry handling.

    Every API call goes through ``RetryHandler.execute_with_retry`` so that
    rate limits and server errors are retried with backoff.

    Example:
        >>> sheets = GoogleSheetsService(credentials=config.get_google_service_account_info())
        >>> rows = sheets.read_values(spreadsheet_id, "weekly_summaries!A:G")
    """

    def __init__(
        self,
        credentials: Optional[Dict[str, Any]] = None,
        retry_handler: Optional[RetryHandler] = None,
        scopes: Optional[List[str]] = None,
        api_client: Any = None,
    ):
        """
        Initialize the service.

        Args:
            credentials: Service account info from
                config.get_google_service_account_info(). Falls back to
                Application Default Credentials when None.
            retry_handler: Retry handler; a default one is created if omitted
            scopes: OAuth scopes
            api_client: Prebuilt Sheets API client, skips authentication
        """
        self.credentials_info = credentials
        self.retry_handler = retry_handler or RetryHandler()
        self.scopes = scopes or SHEETS_SCOPES
        self._service = api_client if api_client is not None else self._create_service()

    def _create_service(self):
        try:
            if self.credentials_info:
                credentials = service_account.Credentials.from_service_account_info(
                    self.credentials_info, scopes=self.scopes
                )
                project = self.credentials_info.get("project_id", "unknown")
                logger.info(f"Sheets client using service account for {project}")
                logger.debug(
                    f"Service account info: {sanitize_sensitive_data(self.credentials_info)}"
                )
            else:
                credentials, project = google.auth.default(scopes=self.scopes)
                logger.info(f"Sheets client using ADC for project {project}")

            return build("sheets", "v4", credentials=credentials, cache_discovery=False)

        except Exception as e:
            logger.error(f"Failed to initialize Google Sheets service: {e}")
            raise

    def _execute(self, request_factory, description: str) -> Dict[str, Any]:
        try:
            return self.retry_handler.execute_with_retry(
                lambda: request_factory().execute()
            )
        except HttpError as e:
            logger.error(f"Sheets API error during {description}: {e}")
            raise

    def read_values(
        self,
        spreadsheet_id: str,
        range_name: str,
        value_render_option: str = "UNFORMATTED_VALUE",
    ) -> List[List[Any]]:
        """
        Read raw cell values from a range.

        Returns:
            List of rows; empty when the range has no data

        Raises:
            HttpError: If the API request fails with a non-retryable error
            RetryExhaustedError: If retries ran out
        """
        result = self._execute(
            lambda: self._service.spreadsheets()
            .values()
            .get(
                spreadsheetId=spreadsheet_id,
                range=range_name,
                valueRenderOption=value_render_option,
            ),
            f"read of {range_name}",
        )
        values = result.get("values", [])
        logger.debug(f"Read {len(values)} rows from {range_name}")
        return values

    def update_values(
        self,
        spreadsheet_id: str,
        range_name: str,
        values: List[List[Any]],
        value_input_option: str = "RAW",
    ) -> Dict[str, Any]:
        """
        Overwrite a range with the given rows.

        Returns:
            API response
        """
        result = self._execute(
            lambda: self._service.spreadsheets()
            .values()
            .update(
                spreadsheetId=spreadsheet_id,
                range=range_name,
                valueInputOption=value_input_option,
                body={"values": values},
            ),
            f"update of {range_name}",
        )
        logger.info(
            f"Updated {result.get('updatedCells', 0)} cells in {range_name}"
        )
        return result

    def append_values(
        self,
        spreadsheet_id: str,
        range_name: str,
        values: List[List[Any]],
        value_input_option: str = "RAW",
    ) -> Dict[str, Any]:
        """
        Append rows after the last row of a range.

        Returns:
            API response
        """
        result = self._execute(
            lambda: self._service.spreadsheets()
            .values()
            .append(
                spreadsheetId=spreadsheet_id,
                range=range_name,
                valueInputOption=value_input_option,
                insertDataOption="INSERT_ROWS",
                body={"values": values},
            ),
            f"append to {range_name}",
        )
        logger.info(f"Appended {len(values)} rows to {range_name}")
        return result

    def get_sheet_titles(self, spreadsheet_id: str) -> List[str]:
        """Titles of all sheets (tabs) in a spreadsheet."""
        result = self._execute(
            lambda: self._service.spreadsheets().get(
                spreadsheetId=spreadsheet_id, fields="sheets.properties.title"
            ),
            "metadata read",
        )
        return [s["properties"]["title"] for s in result.get("sheets", [])]

    def create_sheet(self, spreadsheet_id: str, sheet_title: str) -> Dict[str, Any]:
        """Add a new sheet (tab) to an existing spreadsheet."""
        body = {"requests": [{"addSheet": {"properties": {"title": sheet_title}}}]}
        result = self._execute(
            lambda: self._service.spreadsheets().batchUpdate(
                spreadsheetId=spreadsheet_id, body=body
            ),
            f"creation of sheet '{sheet_title}'",
        )
        logger.info(f"Created sheet '{sheet_title}' in {spreadsheet_id}")
        return result
