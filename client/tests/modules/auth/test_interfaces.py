from unittest.mock import MagicMock

from modules.auth.interfaces import IAuthService, IProfileStore, ISessionStore
from modules.auth.repository import ProfileRepository
from modules.auth.service import AuthService
from modules.auth.session_store import SupabaseSessionStore

from fakes import FakeProfileStore, FakeSessionStore


class TestAuthInterfaces:
    def test_auth_service_implements_interface(self, session_store, profile_store, settings):
        """AuthService should satisfy IAuthService."""
        service = AuthService(session_store, profile_store, settings=settings)
        assert isinstance(service, IAuthService)

    def test_fakes_satisfy_store_interfaces(self):
        assert isinstance(FakeSessionStore(), ISessionStore)
        assert isinstance(FakeProfileStore(), IProfileStore)

    def test_supabase_adapters_satisfy_store_interfaces(self):
        client = MagicMock()
        assert isinstance(SupabaseSessionStore(client), ISessionStore)
        assert isinstance(ProfileRepository(client), IProfileStore)

    def test_interface_methods_exist(self):
        methods = ["start", "close", "sign_in", "sign_up", "sign_out", "refresh_profile", "subscribe"]
        for method in methods:
            assert hasattr(IAuthService, method)
            assert callable(getattr(AuthService, method))
