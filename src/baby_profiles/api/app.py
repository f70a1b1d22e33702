"""FastAPI application factory."""

import logging
from collections.abc import Awaitable, Callable

from fastapi import Depends, FastAPI, Request, Response, status
from fastapi.responses import HTMLResponse
from starlette.concurrency import run_in_threadpool

from baby_profiles.api.admin import router as admin_router
from baby_profiles.api.errors import RouteRedirect, error_response, redirect
from baby_profiles.api.guards import get_caller, require_session
from baby_profiles.api.models import LoginForm
from baby_profiles.api.pages import callback_failed_page, login_page
from baby_profiles.api.records import router as records_router
from baby_profiles.api.session_cookies import read_storage, write_storage
from baby_profiles.app_logging import configure_logging
from baby_profiles.config import build_redirect_url
from baby_profiles.containers import AppContainer
from baby_profiles.domain.errors import RecordsError
from baby_profiles.domain.models import Session
from baby_profiles.services.access import (
    ADMIN_ROUTE,
    AUTH_CALLBACK_ROUTE,
    LANDING_ROUTE,
    LOGIN_ROUTE,
)
from baby_profiles.services.auth_callback import CallbackState

_NAVIGATION = [
    {"label": "Baby List Management", "path": "/babies"},
    {"label": "Make New Profile", "path": "/babies/choices"},
    {"label": "Search Profile History", "path": "/babies/{baby_id}/profiles"},
]
_ADMIN_NAVIGATION = {"label": "System Management", "path": f"{ADMIN_ROUTE}/users"}


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    app = FastAPI()
    app.state.container = container

    @app.middleware("http")
    async def bind_caller(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        state_container: AppContainer = request.app.state.container
        storage = read_storage(request.cookies)
        caller = state_container.open_caller(storage)
        session = await run_in_threadpool(caller.session_manager.initialize)
        logger.debug("Session resolved", extra={"authenticated": session is not None})
        request.state.caller = caller
        try:
            response = await call_next(request)
        finally:
            caller.session_manager.close()
        write_storage(response, storage, request.cookies, state_container.settings)
        return response

    @app.exception_handler(RouteRedirect)
    async def handle_redirect(request: Request, exc: RouteRedirect) -> Response:
        return redirect(exc.location)

    @app.exception_handler(RecordsError)
    async def handle_records_error(request: Request, exc: RecordsError) -> Response:
        state_container: AppContainer = request.app.state.container
        return error_response(exc, state_container.settings)

    app.include_router(records_router)
    app.include_router(admin_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/")
    async def root(request: Request) -> Response:
        """Send the caller to the dashboard or the login page."""
        if get_caller(request).session_manager.is_authenticated:
            return redirect(LANDING_ROUTE)
        return redirect(LOGIN_ROUTE)

    @app.get(LOGIN_ROUTE)
    async def login(request: Request) -> Response:
        """Render the login page, or skip it when already signed in."""
        state_container: AppContainer = request.app.state.container
        if get_caller(request).session_manager.is_authenticated:
            return redirect(LANDING_ROUTE)
        return HTMLResponse(login_page(state_container.settings.oauth_provider))

    @app.post(LOGIN_ROUTE)
    def login_with_password(form: LoginForm, request: Request) -> Response:
        """Sign in with email and password."""
        state_container: AppContainer = request.app.state.container
        try:
            get_caller(request).session_manager.sign_in_with_password(
                form.email, form.password
            )
        except RecordsError as exc:
            return error_response(
                exc,
                state_container.settings,
                form={"email": form.email},
                status_code=status.HTTP_401_UNAUTHORIZED,
            )
        return redirect(LANDING_ROUTE)

    @app.get(f"{LOGIN_ROUTE}/oauth")
    def login_with_oauth(request: Request) -> Response:
        """Redirect to the identity provider."""
        state_container: AppContainer = request.app.state.container
        settings = state_container.settings
        try:
            url = get_caller(request).session_manager.sign_in_with_oauth(
                settings.oauth_provider,
                build_redirect_url(settings.site_url, AUTH_CALLBACK_ROUTE),
            )
        except RecordsError as exc:
            logger.warning(
                "OAuth sign-in could not start", extra={"error": exc.message}
            )
            return HTMLResponse(
                login_page(settings.oauth_provider, error=exc.message),
                status_code=status.HTTP_502_BAD_GATEWAY,
            )
        return redirect(url)

    @app.get(AUTH_CALLBACK_ROUTE)
    def auth_callback(
        request: Request,
        code: str | None = None,
        error: str | None = None,
        error_description: str | None = None,
    ) -> Response:
        """Finish the OAuth round trip."""
        outcome = get_caller(request).auth_callback_flow.run(
            code=code, provider_error=error_description or error
        )
        if outcome.state is CallbackState.AUTHENTICATED:
            return redirect(outcome.redirect_to)
        return HTMLResponse(
            callback_failed_page(outcome), status_code=status.HTTP_401_UNAUTHORIZED
        )

    @app.post("/logout")
    def logout(
        request: Request, session: Session = Depends(require_session)
    ) -> Response:
        """Sign out and return to the login page."""
        state_container: AppContainer = request.app.state.container
        try:
            get_caller(request).session_manager.sign_out()
        except RecordsError as exc:
            return error_response(exc, state_container.settings)
        return redirect(LOGIN_ROUTE)

    @app.get(LANDING_ROUTE)
    async def dashboard(
        session: Session = Depends(require_session),
    ) -> dict[str, object]:
        """Return the landing page data for the signed-in account."""
        navigation = list(_NAVIGATION)
        if session.is_admin:
            navigation.append(_ADMIN_NAVIGATION)
        return {
            "email": session.email,
            "role": session.role,
            "is_admin": session.is_admin,
            "navigation": navigation,
        }

    return app
