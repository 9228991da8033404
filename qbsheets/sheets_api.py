"""Google Sheets client that writes scoresheets with batched requests.

Every export is one optional batchClear followed by one batchUpdate, which
keeps the bot well under the Sheets API quota. Rate limit errors are retried
with exponential back-off; permission errors are reported so the user can share
the sheet with the bot's service account.
"""

import asyncio
import json
import logging
import threading
from typing import Any, Callable, Optional
from urllib.parse import urlsplit

import httplib2
from google.oauth2 import service_account
from google_auth_httplib2 import AuthorizedHttp
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from .models import CellWrite, Result
from .schemas import SheetsConfig

logger = logging.getLogger('qbsheets.sheets_api')

SCOPES = ['https://www.googleapis.com/auth/spreadsheets']
TOKEN_URI = 'https://oauth2.googleapis.com/token'

MAX_ATTEMPTS = 5
RETRY_BASE_DELAY_MS = 1000
RETRYABLE_STATUS_CODES = (403, 429)
PERMISSION_DENIED_REASONS = frozenset({'appNotAuthorizedToFile', 'forbidden', 'insufficientFilePermissions'})

SUCCESS_MESSAGE = 'Export successful'
NOT_CONFIGURED_MESSAGE = (
    "This instance of the bot doesn't support Google Sheets, because the Google account "
    "information for the bot isn't configured."
)
PARTIAL_UPDATE_MESSAGE = 'Could only partially update the spreadsheet. Try again.'


class SheetsHandle:
    """
    A Sheets API service, the credentials behind it and the service account it acts as.

    Exports acquire the handle for as long as they use it. A retired handle
    is closed once its last export releases it.
    """

    def __init__(self, service: Any, service_account_email: str, credentials: Any = None):
        self.service = service
        self.service_account_email = service_account_email
        self.credentials = credentials
        self._users = 0
        self._retired = False
        self._closed = False
        self._lock = threading.Lock()

    def acquire(self) -> bool:
        """Register an export using the handle. False once the handle is retired."""
        with self._lock:
            if self._retired:
                return False
            self._users += 1
            return True

    def release(self) -> None:
        with self._lock:
            self._users -= 1
            should_close = self._should_close()
        if should_close:
            self._close()

    def retire(self) -> None:
        """Close now if idle, otherwise when the last export releases the handle."""
        with self._lock:
            self._retired = True
            should_close = self._should_close()
        if should_close:
            self._close()

    def new_http(self):
        """
        Authorized Http for a single request.

        httplib2.Http isn't thread-safe, and each request runs on its own
        worker thread, so requests never share one.
        """
        if self.credentials is None:
            return None
        return AuthorizedHttp(self.credentials, http=httplib2.Http())

    def _should_close(self) -> bool:
        if self._retired and self._users == 0 and not self._closed:
            self._closed = True
            return True
        return False

    def _close(self) -> None:
        close = getattr(self.service, 'close', None)
        if close is not None:
            close()


def build_credentials(config: SheetsConfig):
    """Service account credentials for the configured Google app."""
    return service_account.Credentials.from_service_account_info(
        {
            'type': 'service_account',
            'client_email': config.google_app_email,
            'private_key': config.google_app_private_key,
            'token_uri': TOKEN_URI,
        },
        scopes=SCOPES,
    )


def create_sheets_handle(config: SheetsConfig) -> SheetsHandle:
    """
    Build a Sheets API v4 service from the configured service account.

    Args:
        config: Config with google_app_email and google_app_private_key set

    Returns:
        SheetsHandle wrapping a googleapiclient Resource for the Sheets API
    """
    credentials = build_credentials(config)
    service = build('sheets', 'v4', credentials=credentials, cache_discovery=False)
    return SheetsHandle(service, config.google_app_email, credentials)


def get_retry_delay_ms(attempt: int) -> int:
    """Back-off before retrying after the given attempt: 3s, 5s, 9s, 17s."""
    return RETRY_BASE_DELAY_MS * (1 + 2**attempt)


def get_path_segments(path: str) -> list[str]:
    """
    Split a URL path into segments that keep their trailing slash.

    Example:
        get_path_segments('/spreadsheets/d/ID/edit') -> ['/', 'spreadsheets/', 'd/', 'ID/', 'edit']
    """
    if not path.startswith('/'):
        path = '/' + path

    segments = ['/']
    for part in path[1:].split('/'):
        segments.append(f'{part}/')

    # The last part only has a slash if the path ended with one
    last = segments.pop()
    if last != '/':
        segments.append(last[:-1])
    return segments


def try_get_sheets_id(sheets_url: str) -> Result[str]:
    """
    Pull the spreadsheet ID out of a Google Sheets URL.

    Sheets URLs look like https://docs.google.com/spreadsheets/d/ID/edit#gid=87173672

    Returns:
        Result with the spreadsheet ID, or a message explaining what's wrong with the URL
    """
    try:
        parsed = urlsplit(sheets_url.strip())
    except (AttributeError, ValueError):
        return Result.fail("The URL isn't valid. Be sure to copy the full URL from the address bar.")

    if not parsed.scheme or not parsed.netloc:
        return Result.fail("The URL isn't valid. Be sure to copy the full URL from the address bar.")

    segments = get_path_segments(parsed.path)
    if len(segments) < 4:
        return Result.fail(
            "The URL doesn't have the sheets ID in it. Be sure to copy the full URL from the address bar."
        )
    if segments[1].lower() != 'spreadsheets/':
        return Result.fail(
            "The URL isn't for a spreadsheet. Be sure to copy the full URL from the address bar."
        )

    return Result.ok(segments[3].rstrip('/'))


def get_error_reasons(exception: HttpError) -> set[str]:
    """Collect the 'reason' fields from a Google API error response."""
    reasons = set()
    try:
        content = exception.content.decode('utf-8') if exception.content else ''
        error = json.loads(content).get('error', {}) if content else {}
    except (ValueError, AttributeError):
        error = {}

    if isinstance(error, dict):
        for key in ('errors', 'details'):
            for detail in error.get(key) or []:
                if isinstance(detail, dict) and detail.get('reason'):
                    reasons.add(detail['reason'])

    if isinstance(exception.error_details, list):
        for detail in exception.error_details:
            if isinstance(detail, dict) and detail.get('reason'):
                reasons.add(detail['reason'])

    return reasons


def get_status_code(exception: HttpError) -> int:
    try:
        return int(exception.resp.status)
    except (AttributeError, TypeError, ValueError):
        return 0


class GoogleSheetsApi:
    """
    Writes cell updates to Google Sheets.

    The service handle is swapped as a single reference when the config
    changes. A call acquires the handle once and uses it for every retry, and
    the old handle is only closed after every call using it has finished, so
    a rotation never affects an export that is already running.
    """

    def __init__(
        self,
        config: SheetsConfig,
        handle_factory: Optional[Callable[[SheetsConfig], SheetsHandle]] = None,
    ):
        """
        Args:
            config: Exporter config holding the service account credentials
            handle_factory: Builds a Sheets handle from a config (default: create_sheets_handle)
        """
        self._handle_factory = handle_factory or create_sheets_handle
        self._handle = self._create_handle(config)

    @property
    def is_configured(self) -> bool:
        return self._handle is not None

    def _create_handle(self, config: SheetsConfig) -> Optional[SheetsHandle]:
        if not config.has_google_credentials:
            return None

        return self._handle_factory(config)

    def _acquire_handle(self) -> Optional[SheetsHandle]:
        # A handle retired between the read and the acquire is skipped for the new one
        while True:
            handle = self._handle
            if handle is None or handle.acquire():
                return handle

    def on_configuration_change(self, config: SheetsConfig) -> None:
        """Rebuild the service for new credentials, then retire the old one."""
        new_handle = self._create_handle(config)
        old_handle = self._handle
        self._handle = new_handle
        logger.info(
            'Google Sheets credentials '
            f'{"updated" if new_handle is not None else "removed"}'
        )

        if old_handle is not None:
            old_handle.retire()

    def close(self) -> None:
        handle = self._handle
        self._handle = None
        if handle is not None:
            handle.retire()

    async def update_google_sheet(
        self, writes: list[CellWrite], clear_ranges: list[str], sheets_url: str
    ) -> Result[str]:
        """
        Clear ranges, then write every cell, in a Google Sheet.

        Args:
            writes: Cell writes to send in one batch update
            clear_ranges: A1 ranges to clear before writing
            sheets_url: URL of the Google Sheet

        Returns:
            Result with a success message, or a message describing what went wrong
        """
        sheets_id_result = try_get_sheets_id(sheets_url)
        handle = self._acquire_handle()
        if handle is None:
            return Result.fail(NOT_CONFIGURED_MESSAGE)

        try:
            if not sheets_id_result.success:
                return sheets_id_result
            return await self._update_with_retries(handle, sheets_id_result.value, writes, clear_ranges, sheets_url)
        finally:
            handle.release()

    async def _update_with_retries(
        self,
        handle: SheetsHandle,
        sheets_id: str,
        writes: list[CellWrite],
        clear_ranges: list[str],
        sheets_url: str,
    ) -> Result[str]:
        attempt = 1
        while True:
            try:
                return await self._execute_update(handle, sheets_id, writes, clear_ranges)
            except HttpError as exception:
                status_code = get_status_code(exception)
                if status_code == 403 and get_error_reasons(exception) & PERMISSION_DENIED_REASONS:
                    logger.error(
                        f"Error writing to the scoresheet at {sheets_url}: bot doesn't have permission",
                        exc_info=exception,
                    )
                    return Result.fail(
                        "The bot doesn't have write permissions to the Google Sheet. Please give "
                        f'`{handle.service_account_email}` access to the Sheet by sharing it with them as an Editor.'
                    )

                if status_code in RETRYABLE_STATUS_CODES and attempt < MAX_ATTEMPTS:
                    delay_ms = get_retry_delay_ms(attempt)
                    logger.error(
                        f'Retrying after attempt {attempt} got a {status_code} error for the scoresheet at '
                        f'{sheets_url}; waiting {delay_ms} ms',
                        exc_info=exception,
                    )
                    await asyncio.sleep(delay_ms / 1000)
                    attempt += 1
                    continue

                logger.error(f'Error writing to the scoresheet at {sheets_url}', exc_info=exception)
                message = exception.reason if getattr(exception, 'reason', None) else str(exception)
                return Result.fail(f'Error writing to the Google Sheet: "{message}"')
            except Exception as exception:
                logger.error(f'Error writing to the scoresheet at {sheets_url}', exc_info=exception)
                return Result.fail(f'Error writing to the Google Sheet: "{exception}"')

    async def _execute_update(
        self, handle: SheetsHandle, sheets_id: str, writes: list[CellWrite], clear_ranges: list[str]
    ) -> Result[str]:
        values = handle.service.spreadsheets().values()
        if clear_ranges:
            clear_request = values.batchClear(spreadsheetId=sheets_id, body={'ranges': list(clear_ranges)})
            await asyncio.to_thread(clear_request.execute, http=handle.new_http())

        update_request = values.batchUpdate(
            spreadsheetId=sheets_id,
            body={
                'valueInputOption': 'RAW',
                'data': [write.to_value_range() for write in writes],
            },
        )
        response = await asyncio.to_thread(update_request.execute, http=handle.new_http())

        if any(update.get('updatedCells', 0) == 0 for update in response.get('responses', [])):
            logger.warning(f'Partial update of spreadsheet {sheets_id}')
            return Result.fail(PARTIAL_UPDATE_MESSAGE)

        logger.info(f'Wrote {len(writes)} ranges to spreadsheet {sheets_id}')
        return Result.ok(SUCCESS_MESSAGE)
