"""
Provider registry: which instance serves a ProviderKind.

Run: python3 -m pytest providers/__tests__/test_registry.py -v
"""
from unittest.mock import MagicMock, patch

import pytest

from auth.models import AuthenticatedUser
from config.settings import settings
from errors import AuthenticationError, ConfigurationError
from models.enums import ProviderKind
from providers.hosted import HostedProvider
from providers.mock import MockProvider
from providers.registry import get_mock_provider, resolve_provider

USER = AuthenticatedUser(user_id="user-1", email="me@example.com", access_token="token-abc")


class TestResolveProvider:

    def test_mock_is_shared_singleton(self):
        first = resolve_provider(ProviderKind.MOCK)
        second = resolve_provider(ProviderKind.MOCK, USER)

        assert isinstance(first, MockProvider)
        assert first is second is get_mock_provider()

    def test_hosted_requires_user(self):
        with pytest.raises(AuthenticationError, match="Sign in"):
            resolve_provider(ProviderKind.HOSTED)

    def test_hosted_requires_configuration(self, monkeypatch):
        monkeypatch.setattr(settings, "SUPABASE_URL", "")
        monkeypatch.setattr(settings, "SUPABASE_ANON_KEY", "")

        with pytest.raises(ConfigurationError):
            resolve_provider(ProviderKind.HOSTED, USER)

    def test_hosted_scoped_to_user(self, monkeypatch):
        monkeypatch.setattr(settings, "SUPABASE_URL", "https://project.supabase.co")
        monkeypatch.setattr(settings, "SUPABASE_ANON_KEY", "anon-key")
        fake_client = MagicMock()

        with patch("db.supabase_client.create_client", return_value=fake_client) as create_client:
            provider = resolve_provider(ProviderKind.HOSTED, USER)

        create_client.assert_called_once_with("https://project.supabase.co", "anon-key")
        fake_client.postgrest.auth.assert_called_once_with("token-abc")
        assert isinstance(provider, HostedProvider)
        assert provider.owner_id == "user-1"

    def test_relational_requires_database_url(self, monkeypatch):
        from db import session as db_session
        from providers import registry

        registry.get_relational_provider.cache_clear()
        db_session.get_engine.cache_clear()
        db_session.get_session_factory.cache_clear()
        monkeypatch.delenv("DATABASE_URL", raising=False)

        try:
            with pytest.raises(ConfigurationError, match="DATABASE_URL"):
                resolve_provider(ProviderKind.RELATIONAL)
        finally:
            registry.get_relational_provider.cache_clear()
            db_session.get_engine.cache_clear()
            db_session.get_session_factory.cache_clear()
