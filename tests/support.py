"""Shared builders for tests: in-memory settings, database, app and sample rows."""

from datetime import datetime

from fastapi.testclient import TestClient

from prowler_dashboard.core.config import Settings
from prowler_dashboard.core.database import Database
from prowler_dashboard.main import create_app
from prowler_dashboard.models import Asset, ProwlerConfiguration, User, UserRole
from prowler_dashboard.services.users import create_user

SQLITE_MEMORY_URL = "sqlite://"
TEST_SECRET = "test-session-secret"


def make_settings(**overrides: object) -> Settings:
    values: dict[str, object] = {
        "DATABASE_URL": SQLITE_MEMORY_URL,
        "SESSION_SECRET": TEST_SECRET,
        "APP_ENV": "dev",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_database() -> Database:
    database = Database(SQLITE_MEMORY_URL)
    database.create_all()
    return database


def make_client(**settings_overrides: object) -> TestClient:
    app = create_app(make_settings(**settings_overrides))
    app.state.database.create_all()
    return TestClient(app)


def add_user(
    db,
    username: str = "alice",
    password: str = "secret1",
    role: UserRole = UserRole.USER,
    email: str | None = None,
) -> User:
    return create_user(
        db,
        username=username,
        email=email or f"{username}@example.com",
        password=password,
        first_name="Test",
        last_name="User",
        role=role,
    )


def add_configuration(db, user_id: str, active: bool = True) -> ProwlerConfiguration:
    config = ProwlerConfiguration(
        user_id=user_id,
        prowler_url="https://prowler.example.com",
        prowler_email="scanner@example.com",
        prowler_password_hash="not-a-real-hash",
        is_active=active,
    )
    db.add(config)
    db.commit()
    return config


def add_asset(
    db,
    configuration_id: str,
    resource_id: str,
    resource_name: str | None = None,
    resource_type: str = "ec2-instance",
    status: str = "unknown",
    severity: str | None = "low",
    updated_at: datetime | None = None,
    last_checked_at: datetime | None = None,
) -> Asset:
    asset = Asset(
        configuration_id=configuration_id,
        resource_id=resource_id,
        resource_name=resource_name or resource_id,
        resource_type=resource_type,
        status=status,
        severity=severity,
        last_checked_at=last_checked_at,
    )
    if updated_at is not None:
        asset.updated_at = updated_at
    db.add(asset)
    db.commit()
    return asset
