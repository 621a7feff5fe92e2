"""Prowler client: login handshake, connection test, resource fetch and field normalization (httpx mocked)."""

import asyncio
import unittest
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock, patch

import httpx

from prowler_dashboard.services.prowler_client import (
    HEALTH_PATH,
    LOGIN_PATH,
    RESOURCES_PATH,
    ProwlerClient,
    extract_token,
    map_resource,
    map_resources,
    normalize_severity,
    normalize_status,
)

BASE_URL = "https://prowler.example.com"


def _response(status_code: int, body: object = None) -> MagicMock:
    resp = MagicMock()
    resp.status_code = status_code
    if isinstance(body, Exception):
        resp.json.side_effect = body
    else:
        resp.json.return_value = body
    return resp


def _install_client(mock_client_class: MagicMock, post: AsyncMock, get: AsyncMock) -> MagicMock:
    mock_instance = MagicMock()
    mock_instance.post = post
    mock_instance.get = get
    mock_client_class.return_value.__aenter__ = AsyncMock(return_value=mock_instance)
    mock_client_class.return_value.__aexit__ = AsyncMock(return_value=None)
    return mock_instance


class TestConnectionProbe(unittest.TestCase):

    @patch("prowler_dashboard.services.prowler_client.httpx.AsyncClient")
    def test_success_logs_in_then_hits_health_with_bearer(self, mock_client_class: MagicMock) -> None:
        post = AsyncMock(return_value=_response(200, {"access_token": "tok-1"}))
        get = AsyncMock(return_value=_response(200, {"status": "ok"}))
        _install_client(mock_client_class, post, get)

        result = asyncio.run(ProwlerClient(timeout=5).test_connection(BASE_URL + "/", "a@b.co", "pw"))

        self.assertTrue(result.success)
        self.assertIsNone(result.error)
        post.assert_awaited_once()
        self.assertEqual(post.call_args[0][0], BASE_URL + LOGIN_PATH)
        self.assertEqual(post.call_args[1]["json"], {"email": "a@b.co", "password": "pw"})
        self.assertEqual(get.call_args[0][0], BASE_URL + HEALTH_PATH)
        self.assertEqual(get.call_args[1]["headers"], {"Authorization": "Bearer tok-1"})

    @patch("prowler_dashboard.services.prowler_client.httpx.AsyncClient")
    def test_token_under_alternate_key(self, mock_client_class: MagicMock) -> None:
        post = AsyncMock(return_value=_response(200, {"token": "tok-2"}))
        get = AsyncMock(return_value=_response(200, {}))
        _install_client(mock_client_class, post, get)

        result = asyncio.run(ProwlerClient().test_connection(BASE_URL, "a@b.co", "pw"))

        self.assertTrue(result.success)
        self.assertEqual(get.call_args[1]["headers"]["Authorization"], "Bearer tok-2")

    @patch("prowler_dashboard.services.prowler_client.httpx.AsyncClient")
    def test_login_rejected(self, mock_client_class: MagicMock) -> None:
        post = AsyncMock(return_value=_response(401, {"detail": "bad"}))
        get = AsyncMock()
        _install_client(mock_client_class, post, get)

        result = asyncio.run(ProwlerClient().test_connection(BASE_URL, "a@b.co", "pw"))

        self.assertFalse(result.success)
        self.assertIn("401", result.error)
        get.assert_not_awaited()

    @patch("prowler_dashboard.services.prowler_client.httpx.AsyncClient")
    def test_login_without_token(self, mock_client_class: MagicMock) -> None:
        post = AsyncMock(return_value=_response(200, {"user": "x"}))
        get = AsyncMock()
        _install_client(mock_client_class, post, get)

        result = asyncio.run(ProwlerClient().test_connection(BASE_URL, "a@b.co", "pw"))

        self.assertFalse(result.success)
        self.assertEqual(result.error, "No access token received from Prowler API")
        get.assert_not_awaited()

    @patch("prowler_dashboard.services.prowler_client.httpx.AsyncClient")
    def test_health_failure(self, mock_client_class: MagicMock) -> None:
        post = AsyncMock(return_value=_response(200, {"access_token": "tok"}))
        get = AsyncMock(return_value=_response(503, None))
        _install_client(mock_client_class, post, get)

        result = asyncio.run(ProwlerClient().test_connection(BASE_URL, "a@b.co", "pw"))

        self.assertFalse(result.success)
        self.assertIn("503", result.error)

    @patch("prowler_dashboard.services.prowler_client.httpx.AsyncClient")
    def test_timeout_is_reported_not_raised(self, mock_client_class: MagicMock) -> None:
        post = AsyncMock(side_effect=httpx.ReadTimeout("slow"))
        _install_client(mock_client_class, post, AsyncMock())

        result = asyncio.run(ProwlerClient().test_connection(BASE_URL, "a@b.co", "pw"))

        self.assertFalse(result.success)
        self.assertIn("timed out", result.error)

    @patch("prowler_dashboard.services.prowler_client.httpx.AsyncClient")
    def test_connection_refused_is_reported(self, mock_client_class: MagicMock) -> None:
        post = AsyncMock(side_effect=httpx.ConnectError("refused"))
        _install_client(mock_client_class, post, AsyncMock())

        result = asyncio.run(ProwlerClient().test_connection(BASE_URL, "a@b.co", "pw"))

        self.assertFalse(result.success)
        self.assertIn("refused", result.error)


class TestFetchResources(unittest.TestCase):

    @patch("prowler_dashboard.services.prowler_client.httpx.AsyncClient")
    def test_maps_listing(self, mock_client_class: MagicMock) -> None:
        listing = {
            "data": [
                {
                    "resource_id": "arn:aws:s3:::logs",
                    "resource_name": "logs",
                    "service": "s3-bucket",
                    "aws_region": "us-east-1",
                    "compliance_status": "FAIL",
                    "risk_level": "Critical",
                    "scan_time": "2025-03-01T10:00:00Z",
                },
                {"name": "no-id-here"},
            ]
        }
        post = AsyncMock(return_value=_response(200, {"accessToken": "tok"}))
        get = AsyncMock(return_value=_response(200, listing))
        _install_client(mock_client_class, post, get)

        result = asyncio.run(ProwlerClient().fetch_resources(BASE_URL, "a@b.co", "pw"))

        self.assertTrue(result.success)
        self.assertEqual(get.call_args[0][0], BASE_URL + RESOURCES_PATH)
        self.assertEqual(len(result.resources), 1)
        resource = result.resources[0]
        self.assertEqual(resource.id, "arn:aws:s3:::logs")
        self.assertEqual(resource.name, "logs")
        self.assertEqual(resource.type, "s3-bucket")
        self.assertEqual(resource.region, "us-east-1")
        self.assertEqual(resource.status, "non-compliant")
        self.assertEqual(resource.severity, "critical")
        self.assertEqual(resource.last_checked.year, 2025)
        self.assertEqual(resource.raw_data["service"], "s3-bucket")

    @patch("prowler_dashboard.services.prowler_client.httpx.AsyncClient")
    def test_listing_failure(self, mock_client_class: MagicMock) -> None:
        post = AsyncMock(return_value=_response(200, {"access_token": "tok"}))
        get = AsyncMock(return_value=_response(500, {}))
        _install_client(mock_client_class, post, get)

        result = asyncio.run(ProwlerClient().fetch_resources(BASE_URL, "a@b.co", "pw"))

        self.assertFalse(result.success)
        self.assertEqual(result.resources, [])
        self.assertIn("500", result.error)


class TestNormalization(unittest.TestCase):

    def test_status_keywords(self) -> None:
        self.assertEqual(normalize_status("PASS"), "compliant")
        self.assertEqual(normalize_status("Compliant"), "compliant")
        self.assertEqual(normalize_status("FAIL"), "non-compliant")
        self.assertEqual(normalize_status("non-compliant"), "non-compliant")
        self.assertEqual(normalize_status("Warning"), "warning")
        self.assertEqual(normalize_status("MANUAL"), "unknown")
        self.assertEqual(normalize_status(None), "unknown")

    def test_severity_keywords(self) -> None:
        self.assertEqual(normalize_severity("CRITICAL"), "critical")
        self.assertEqual(normalize_severity("severe"), "critical")
        self.assertEqual(normalize_severity("High"), "high")
        self.assertEqual(normalize_severity("moderate"), "medium")
        self.assertEqual(normalize_severity("informational"), "low")
        self.assertEqual(normalize_severity(""), "low")

    def test_alias_priority_and_defaults(self) -> None:
        resource = map_resource({"id": "i-1", "arn": "arn:ignored", "status": "pass"})
        self.assertEqual(resource.id, "i-1")
        self.assertEqual(resource.name, "i-1")
        self.assertEqual(resource.type, "unknown")
        self.assertIsNone(resource.region)
        self.assertEqual(resource.severity, "low")
        self.assertIsNotNone(resource.last_checked)

    def test_timestamp_without_offset_is_utc(self) -> None:
        resource = map_resource({"id": "i-1", "last_checked": "2025-03-01T10:00:00"})
        self.assertEqual(resource.last_checked, datetime(2025, 3, 1, 10, 0, tzinfo=UTC))
        self.assertIsNotNone(resource.last_checked.tzinfo)

    def test_item_without_identifier_is_dropped(self) -> None:
        self.assertIsNone(map_resource({"name": "orphan"}))
        self.assertEqual(map_resources([{"name": "orphan"}, "junk", {"arn": "a1"}])[0].id, "a1")

    def test_listing_shapes(self) -> None:
        self.assertEqual(len(map_resources({"resources": [{"id": "a"}]})), 1)
        self.assertEqual(len(map_resources([{"id": "a"}, {"id": "b"}])), 2)
        self.assertEqual(map_resources({"unexpected": True}), [])
        self.assertEqual(map_resources(None), [])

    def test_extract_token(self) -> None:
        self.assertEqual(extract_token({"jwt": " t "}), "t")
        self.assertEqual(extract_token({"access_token": "a", "token": "b"}), "a")
        self.assertIsNone(extract_token({"access_token": ""}))
        self.assertIsNone(extract_token(["token"]))


if __name__ == "__main__":
    unittest.main()
