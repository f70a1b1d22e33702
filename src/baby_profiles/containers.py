"""Dependency container wiring for the application."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from supabase import ClientOptions, create_client

from baby_profiles.adapters.cookie_session_storage import CookieSessionStorage
from baby_profiles.adapters.supabase_auth_gateway import SupabaseAuthGateway
from baby_profiles.adapters.supabase_baby_repository import SupabaseBabyRepository
from baby_profiles.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from baby_profiles.adapters.supabase_user_admin_repository import (
    SupabaseUserAdminRepository,
)
from baby_profiles.config import Settings
from baby_profiles.services.access import AccessGuard
from baby_profiles.services.auth_callback import AuthCallbackFlow
from baby_profiles.services.babies import BabyRepository, BabyService, utc_now
from baby_profiles.services.inflight import InFlightGuard
from baby_profiles.services.profiles import ProfileRepository, ProfileService
from baby_profiles.services.sessions import AuthGateway, SessionManager
from baby_profiles.services.user_admin import UserAdminRepository, UserAdminService


@dataclass
class CallerServices:
    """Services bound to the session of a single caller."""

    session_manager: SessionManager
    auth_callback_flow: AuthCallbackFlow
    baby_service: BabyService
    profile_service: ProfileService
    user_admin_service: UserAdminService


CallerFactory = Callable[[CookieSessionStorage], CallerServices]


@dataclass
class AppContainer:
    """Holds application-wide dependencies and the per-caller factory."""

    settings: Settings
    access_guard: AccessGuard
    inflight_guard: InFlightGuard
    open_caller: CallerFactory


def build_client_options(storage: CookieSessionStorage) -> ClientOptions:
    """Return Supabase client options for server-side PKCE sign-in."""
    return ClientOptions(
        flow_type="pkce",
        storage=storage,
        auto_refresh_token=False,
    )


def wire_caller(  # noqa: PLR0913
    settings: Settings,
    gateway: AuthGateway,
    baby_repository: BabyRepository,
    profile_repository: ProfileRepository,
    user_admin_repository: UserAdminRepository,
    clock: Callable[[], datetime] = utc_now,
) -> CallerServices:
    """Build the services of one caller around its auth gateway."""
    session_manager = SessionManager(gateway)
    return CallerServices(
        session_manager=session_manager,
        auth_callback_flow=AuthCallbackFlow(
            session_manager=session_manager,
            failure_redirect_seconds=settings.auth_failure_redirect_seconds,
        ),
        baby_service=BabyService(
            repository=baby_repository,
            session_manager=session_manager,
            clock=clock,
        ),
        profile_service=ProfileService(
            repository=profile_repository,
            baby_repository=baby_repository,
            session_manager=session_manager,
            max_attempts=settings.profile_id_max_attempts,
            clock=clock,
        ),
        user_admin_service=UserAdminService(
            repository=user_admin_repository,
            session_manager=session_manager,
        ),
    )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()

    def open_caller(storage: CookieSessionStorage) -> CallerServices:
        supabase_client = create_client(
            resolved_settings.supabase_url,
            resolved_settings.supabase_anon_key,
            options=build_client_options(storage),
        )
        return wire_caller(
            resolved_settings,
            gateway=SupabaseAuthGateway(supabase_client),
            baby_repository=SupabaseBabyRepository(supabase_client),
            profile_repository=SupabaseProfileRepository(supabase_client),
            user_admin_repository=SupabaseUserAdminRepository(supabase_client),
        )

    return AppContainer(
        settings=resolved_settings,
        access_guard=AccessGuard(),
        inflight_guard=InFlightGuard(),
        open_caller=open_caller,
    )
