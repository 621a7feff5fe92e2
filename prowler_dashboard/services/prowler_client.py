"""
Prowler API client: connectivity probe and resource listing.

Every call authenticates first (POST /api/auth/login for a bearer token), then
performs one GET with that token. Failures are returned as data; nothing
raised here escapes test_connection or fetch_resources.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError

from prowler_dashboard.models.base import utcnow
from prowler_dashboard.schemas.assets import (
    AssetSeverity,
    AssetStatus,
    ProwlerFetchResult,
    ProwlerResource,
)
from prowler_dashboard.schemas.configuration import ConnectionTestResult

logger = logging.getLogger(__name__)

LOGIN_PATH = "/api/auth/login"
HEALTH_PATH = "/api/health"
RESOURCES_PATH = "/api/v5/resources"

DEFAULT_TIMEOUT_SEC = 30.0

# Keys that may hold the bearer token in the login response, highest priority first.
TOKEN_FIELDS: tuple[str, ...] = ("access_token", "token", "accessToken", "jwt")

# Keys that may hold the list of resources in the listing response.
RESOURCE_LIST_FIELDS: tuple[str, ...] = ("resources", "data")

# Logical resource attribute -> candidate keys in the Prowler payload, highest priority first.
# Prowler's response schema has changed between releases; the first non-empty key wins.
RESOURCE_FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "id": ("id", "resource_id", "arn"),
    "name": ("name", "resource_name", "id"),
    "type": ("type", "resource_type", "service"),
    "region": ("region", "aws_region"),
    "status": ("status", "compliance_status"),
    "severity": ("severity", "risk_level"),
    "last_checked": ("last_checked", "scan_time"),
}

# Keyword fragments (matched as lower-case substrings), checked in order.
# "non-compliant" contains "compliant", so failures are checked first.
_STATUS_KEYWORDS: tuple[tuple[tuple[str, ...], AssetStatus], ...] = (
    (("fail", "non-compliant", "noncompliant"), "non-compliant"),
    (("pass", "compliant"), "compliant"),
    (("warn",), "warning"),
)
_SEVERITY_KEYWORDS: tuple[tuple[tuple[str, ...], AssetSeverity], ...] = (
    (("critical", "severe"), "critical"),
    (("high",), "high"),
    (("medium", "moderate"), "medium"),
)

_DATETIME_ADAPTER = TypeAdapter(datetime)


class ProwlerClientError(Exception):
    """Base for Prowler call failures."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class ProwlerAuthenticationError(ProwlerClientError):
    """Login rejected, or the login response carried no token."""


class ProwlerApiError(ProwlerClientError):
    """The authenticated request failed or returned an unusable body."""


def _is_success(status_code: int) -> bool:
    return 200 <= status_code < 300


def pick_field(item: dict[str, Any], attribute: str) -> Any:
    """Value of the first non-empty candidate key for a logical attribute, or None."""
    for key in RESOURCE_FIELD_ALIASES[attribute]:
        value = item.get(key)
        if value is not None and value != "":
            return value
    return None


def extract_token(body: Any) -> str | None:
    if not isinstance(body, dict):
        return None
    for key in TOKEN_FIELDS:
        value = body.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def normalize_status(raw: Any) -> AssetStatus:
    """Best-effort mapping of a Prowler status string; unknown when nothing matches."""
    if not raw:
        return "unknown"
    lowered = str(raw).lower()
    for fragments, status in _STATUS_KEYWORDS:
        if any(f in lowered for f in fragments):
            return status
    return "unknown"


def normalize_severity(raw: Any) -> AssetSeverity:
    """Best-effort mapping of a Prowler severity string; low when nothing matches."""
    if not raw:
        return "low"
    lowered = str(raw).lower()
    for fragments, severity in _SEVERITY_KEYWORDS:
        if any(f in lowered for f in fragments):
            return severity
    return "low"


def _parse_timestamp(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    try:
        parsed = _DATETIME_ADAPTER.validate_python(value)
    except ValidationError:
        return None
    # Prowler timestamps without an offset are UTC.
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _as_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def map_resource(item: dict[str, Any]) -> ProwlerResource | None:
    """Map one Prowler item to a ProwlerResource; items without any id are dropped."""
    resource_id = _as_text(pick_field(item, "id"))
    if resource_id is None:
        return None
    return ProwlerResource(
        id=resource_id,
        name=_as_text(pick_field(item, "name")) or resource_id,
        type=_as_text(pick_field(item, "type")) or "unknown",
        region=_as_text(pick_field(item, "region")),
        status=normalize_status(pick_field(item, "status")),
        severity=normalize_severity(pick_field(item, "severity")),
        last_checked=_parse_timestamp(pick_field(item, "last_checked")) or utcnow(),
        raw_data=dict(item),
    )


def map_resources(body: Any) -> list[ProwlerResource]:
    """Pull the resource list out of a listing response and map every usable item."""
    items: Any = []
    if isinstance(body, list):
        items = body
    elif isinstance(body, dict):
        for key in RESOURCE_LIST_FIELDS:
            if isinstance(body.get(key), list):
                items = body[key]
                break
    resources: list[ProwlerResource] = []
    skipped = 0
    for item in items:
        mapped = map_resource(item) if isinstance(item, dict) else None
        if mapped is None:
            skipped += 1
            continue
        resources.append(mapped)
    if skipped:
        logger.warning("Skipped %s Prowler resources without an identifier", skipped)
    return resources


def _describe_transport_error(exc: httpx.HTTPError) -> str:
    if isinstance(exc, httpx.TimeoutException):
        return "Prowler API request timed out."
    return f"Prowler API unreachable: {exc!s}" if str(exc) else "Prowler API unreachable."


class ProwlerClient:
    """Stateless client; one instance is shared by the application."""

    def __init__(self, timeout: float = DEFAULT_TIMEOUT_SEC) -> None:
        self.timeout = max(1.0, min(120.0, timeout))

    async def _authenticate(
        self,
        client: httpx.AsyncClient,
        base_url: str,
        email: str,
        password: str,
    ) -> str:
        resp = await client.post(
            f"{base_url}{LOGIN_PATH}",
            json={"email": email, "password": password},
            timeout=self.timeout,
        )
        if not _is_success(resp.status_code):
            raise ProwlerAuthenticationError(
                f"Authentication failed: Prowler returned {resp.status_code}",
                resp.status_code,
            )
        try:
            body = resp.json()
        except ValueError:
            body = None
        token = extract_token(body)
        if not token:
            raise ProwlerAuthenticationError("No access token received from Prowler API")
        return token

    async def _get(
        self,
        client: httpx.AsyncClient,
        base_url: str,
        token: str,
        path: str,
    ) -> Any:
        resp = await client.get(
            f"{base_url}{path}",
            headers={"Authorization": f"Bearer {token}"},
            timeout=self.timeout,
        )
        if not _is_success(resp.status_code):
            raise ProwlerApiError(
                f"API request failed: Prowler returned {resp.status_code}",
                resp.status_code,
            )
        try:
            return resp.json()
        except ValueError:
            return None

    async def _request(self, url: str, email: str, password: str, path: str) -> Any:
        base_url = url.strip().rstrip("/")
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            token = await self._authenticate(client, base_url, email, password)
            return await self._get(client, base_url, token, path)

    async def test_connection(self, url: str, email: str, password: str) -> ConnectionTestResult:
        """Login plus health check. Check result.success; this never raises for upstream failures."""
        try:
            await self._request(url, email, password, HEALTH_PATH)
        except ProwlerClientError as e:
            logger.info("Prowler connection test failed for %s: %s", url, e.message)
            return ConnectionTestResult(success=False, error=e.message)
        except httpx.HTTPError as e:
            message = _describe_transport_error(e)
            logger.info("Prowler connection test failed for %s: %s", url, message)
            return ConnectionTestResult(success=False, error=message)
        return ConnectionTestResult(success=True)

    async def fetch_resources(self, url: str, email: str, password: str) -> ProwlerFetchResult:
        """Login plus resource listing, mapped and normalized. Failures land in result.error."""
        try:
            body = await self._request(url, email, password, RESOURCES_PATH)
        except ProwlerClientError as e:
            logger.warning("Prowler resource fetch failed for %s: %s", url, e.message)
            return ProwlerFetchResult(success=False, error=e.message)
        except httpx.HTTPError as e:
            message = _describe_transport_error(e)
            logger.warning("Prowler resource fetch failed for %s: %s", url, message)
            return ProwlerFetchResult(success=False, error=message)
        return ProwlerFetchResult(success=True, resources=map_resources(body))
