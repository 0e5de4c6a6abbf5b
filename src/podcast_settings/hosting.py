"""Client for the podcast hosting service."""

import logging
from typing import Any, NoReturn, Optional
from urllib.parse import urljoin

import requests
from pydantic import BaseModel

from .config import HostingConfig
from .consts import (
    HOSTING_EMAIL_FIELD,
    HOSTING_SERIES_PATH,
    HOSTING_TOKEN_FIELD,
    HOSTING_VALIDATE_PATH,
    SECTION_FEED_DETAILS,
)
from .errors import ExternalServiceError
from .utils import sanitize

logger = logging.getLogger(__name__)


class CredentialCheck(BaseModel):
    """Outcome of a credential check against the hosting service."""

    valid: bool
    message: str = ""
    account_id: Optional[str] = None
    details: dict[str, Any] = {}


def _handle_request_exception(exception: requests.RequestException, operation: str) -> NoReturn:
    """Log a failed request and raise ExternalServiceError.

    Args:
        exception: The RequestException from requests library
        operation: Description of the operation being performed

    Raises:
        ExternalServiceError: Always raises with formatted error message
    """
    status_code = getattr(exception.response, "status_code", "N/A")
    logger.error(f"Failed to {operation}: status_code={status_code}")
    raise ExternalServiceError(f"Failed to {operation} (status: {status_code})") from exception


class HostingClient:
    """Checks credentials and pushes feed details to the hosting service.

    Requests are not retried; a failure surfaces to the caller at once.
    """

    def __init__(self, config: HostingConfig):
        self.base_url = str(config.api_url)
        if not self.base_url.endswith("/"):
            self.base_url += "/"
        self.timeout = config.timeout

        logger.debug(f"HostingClient initialized: base_url={self.base_url}, timeout={self.timeout}")

    def validate_api_credentials(self, api_token: str, email: str) -> CredentialCheck:
        """Ask the hosting service whether ``api_token`` belongs to ``email``.

        Returns:
            CredentialCheck with ``valid`` set from the service's answer

        Raises:
            ExternalServiceError: If the service is unreachable, answers with
                an HTTP error, or returns a body that is not JSON
        """
        if not api_token or not email:
            return CredentialCheck(valid=False, message="API token and email are required")

        url = urljoin(self.base_url, HOSTING_VALIDATE_PATH)
        logger.info(f"Validating hosting credentials: email={sanitize(email)}, token={sanitize(api_token)}")

        try:
            response = requests.post(
                url,
                data={"api_token": api_token, "email": email},
                timeout=self.timeout,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            _handle_request_exception(e, "validate hosting credentials")

        body = self._json(response, "validate hosting credentials")
        valid = body.get("status") == "success"
        account_id = body.get("podcast_id")

        logger.info(f"Hosting credentials {'valid' if valid else 'rejected'}: email={sanitize(email)}")
        return CredentialCheck(
            valid=valid,
            message=str(body.get("message", "")),
            account_id=str(account_id) if account_id is not None else None,
            details=body,
        )

    def upload_series(self, series_data: dict[str, Any], api_token: str) -> dict[str, Any]:
        """Send the feed details of one series to the hosting service.

        Raises:
            ExternalServiceError: If the request fails
        """
        url = urljoin(self.base_url, HOSTING_SERIES_PATH)
        payload = {**series_data, "api_token": api_token}

        logger.info(f"Uploading series {series_data.get('series_id', 0)} to hosting service")
        try:
            response = requests.post(url, data=payload, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            _handle_request_exception(e, "upload series")

        return self._json(response, "upload series")

    @staticmethod
    def is_connected(engine) -> bool:
        """True when both the hosting email and API token are stored."""
        return bool(engine.stored(HOSTING_EMAIL_FIELD)) and bool(engine.stored(HOSTING_TOKEN_FIELD))

    @staticmethod
    def _json(response: requests.Response, operation: str) -> dict[str, Any]:
        try:
            body = response.json()
        except ValueError as e:
            logger.error(f"Failed to {operation}: response is not JSON")
            raise ExternalServiceError(f"Failed to {operation}: invalid response") from e
        if not isinstance(body, dict):
            raise ExternalServiceError(f"Failed to {operation}: unexpected response")
        return body


def series_data(engine, scope_id: Optional[str] = None) -> dict[str, Any]:
    """Resolved feed details of one series, as sent to the hosting service."""
    section = engine.registry.section(SECTION_FEED_DETAILS)
    data: dict[str, Any] = {
        field.id: engine.resolve_field(field, scope_id)
        for field in section.fields
        if not field.is_computed
    }
    data["series_id"] = scope_id or 0
    return data


def sync_series_to_hosting(client: HostingClient, engine):
    """Section observer pushing saved feed details when connected."""

    def observer(section_key: str, scope_id: Optional[str], result) -> None:
        if not result.saved or not client.is_connected(engine):
            return
        try:
            response = client.upload_series(series_data(engine, scope_id), engine.stored(HOSTING_TOKEN_FIELD))
        except ExternalServiceError as e:
            logger.warning(f"Series update not sent to hosting service: {e}")
            return
        logger.debug(f"Series update response: {response}")

    return observer
