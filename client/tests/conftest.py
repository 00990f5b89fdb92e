"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules.
Test doubles live in fakes.py.
"""

import pytest

from shared.config import Settings
from modules.auth.service import reset_auth_service

from fakes import FakePlatform, FakeProfileStore, FakePushSDK, FakeSessionStore


@pytest.fixture(autouse=True)
def reset_auth_singleton():
    """Reset the auth service singleton before and after each test."""
    reset_auth_service()
    yield
    reset_auth_service()


@pytest.fixture
def settings() -> Settings:
    """Settings with every integration configured."""
    return Settings(
        _env_file=None,
        supabase_url="https://test.supabase.co",
        supabase_anon_key="anon-key",
        onesignal_app_id="app-id-123",
        frontend_url="https://sama.example.com",
        receitaws_token="",
    )


@pytest.fixture
def session_store() -> FakeSessionStore:
    return FakeSessionStore()


@pytest.fixture
def profile_store() -> FakeProfileStore:
    return FakeProfileStore()


@pytest.fixture
def push_sdk() -> FakePushSDK:
    return FakePushSDK()


@pytest.fixture
def platform() -> FakePlatform:
    return FakePlatform()
