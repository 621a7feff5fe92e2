"""Shared FastAPI dependencies for app-owned resources."""

from fastapi import Request

from prowler_dashboard.core.config import Settings
from prowler_dashboard.services.prowler_client import ProwlerClient


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_prowler_client(request: Request) -> ProwlerClient:
    return request.app.state.prowler_client
