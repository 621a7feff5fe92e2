"""Configuration service: single active profile per user and connection status updates."""

import unittest
from datetime import UTC, datetime

from prowler_dashboard.core.security import verify_password
from prowler_dashboard.models import ProwlerConfiguration
from prowler_dashboard.services.configuration import (
    get_active_configuration,
    save_configuration,
    update_status,
)
from tests.support import add_user, make_database


class ConfigurationTestCase(unittest.TestCase):

    def setUp(self) -> None:
        self.database = make_database()
        self.db = self.database.session()
        self.user = add_user(self.db, "alice")

    def tearDown(self) -> None:
        self.db.close()
        self.database.dispose()


class TestSaveConfiguration(ConfigurationTestCase):

    def test_no_configuration_yet(self) -> None:
        self.assertIsNone(get_active_configuration(self.db, self.user.id))

    def test_save_hashes_password_and_starts_disconnected(self) -> None:
        config = save_configuration(self.db, self.user.id, "https://p.example.com", "s@example.com", "pw-1")
        self.assertTrue(config.is_active)
        self.assertEqual(config.connection_status, "disconnected")
        self.assertIsNone(config.last_sync_at)
        self.assertNotEqual(config.prowler_password_hash, "pw-1")
        self.assertTrue(verify_password("pw-1", config.prowler_password_hash))

    def test_repeated_saves_leave_exactly_one_active(self) -> None:
        first = save_configuration(self.db, self.user.id, "https://one.example.com", "s@example.com", "pw-1")
        second = save_configuration(self.db, self.user.id, "https://two.example.com", "s@example.com", "pw-2")
        self.db.expire_all()

        rows = self.db.query(ProwlerConfiguration).filter(ProwlerConfiguration.user_id == self.user.id).all()
        self.assertEqual(len(rows), 2)
        self.assertEqual([r.id for r in rows if r.is_active], [second.id])
        self.assertEqual(get_active_configuration(self.db, self.user.id).prowler_url, "https://two.example.com")
        self.assertNotEqual(first.id, second.id)

    def test_users_do_not_share_configurations(self) -> None:
        bob = add_user(self.db, "bob")
        save_configuration(self.db, self.user.id, "https://a.example.com", "s@example.com", "pw")
        save_configuration(self.db, bob.id, "https://b.example.com", "s@example.com", "pw")
        self.assertEqual(get_active_configuration(self.db, self.user.id).prowler_url, "https://a.example.com")
        self.assertEqual(get_active_configuration(self.db, bob.id).prowler_url, "https://b.example.com")


class TestUpdateStatus(ConfigurationTestCase):

    def test_sets_status_and_sync_time(self) -> None:
        config = save_configuration(self.db, self.user.id, "https://p.example.com", "s@example.com", "pw")
        update_status(self.db, config.id, "connected")
        self.db.expire_all()
        stored = get_active_configuration(self.db, self.user.id)
        self.assertEqual(stored.connection_status, "connected")
        self.assertIsNotNone(stored.last_sync_at)

    def test_explicit_sync_time(self) -> None:
        config = save_configuration(self.db, self.user.id, "https://p.example.com", "s@example.com", "pw")
        when = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)
        update_status(self.db, config.id, "error", last_sync_at=when)
        self.db.expire_all()
        stored = get_active_configuration(self.db, self.user.id)
        self.assertEqual(stored.connection_status, "error")
        self.assertEqual(stored.last_sync_at.replace(tzinfo=None), when.replace(tzinfo=None))

    def test_status_only_update_keeps_sync_time(self) -> None:
        config = save_configuration(self.db, self.user.id, "https://p.example.com", "s@example.com", "pw")
        update_status(self.db, config.id, "error", stamp_sync=False)
        self.db.expire_all()
        stored = get_active_configuration(self.db, self.user.id)
        self.assertEqual(stored.connection_status, "error")
        self.assertIsNone(stored.last_sync_at)

    def test_rejects_unknown_status(self) -> None:
        config = save_configuration(self.db, self.user.id, "https://p.example.com", "s@example.com", "pw")
        with self.assertRaises(ValueError):
            update_status(self.db, config.id, "online")


if __name__ == "__main__":
    unittest.main()
