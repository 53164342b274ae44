"""
Application lifecycle event handlers.

Builds the shared API client and the per-session countries screens on startup
and closes the HTTP connection pool on shutdown.
"""

from typing import Callable

import structlog
from fastapi import FastAPI

from core.config import settings
from core.http import TokenStore, create_api_client
from core.i18n import get_translator
from core.sessions import SessionRegistry
from services.country_client import CountryClient
from services.country_store import CountryStore
from views.countries_manager import CountriesManager

logger = structlog.get_logger(__name__)


def create_start_app_handler(app: FastAPI) -> Callable:
    """Create startup event handler."""

    async def start_app() -> None:
        logger.info("Starting Countries Admin...", api_base_url=settings.API_BASE_URL)

        token_store = TokenStore(settings.API_AUTH_TOKEN)
        if not token_store.token:
            logger.warning("api_token_not_configured", message="Admin endpoints will be rejected")

        http_client = create_api_client(token_store)
        app.state.token_store = token_store
        app.state.http_client = http_client
        app.state.translator = get_translator(
            settings.I18N_CATALOG_PATH,
            language=settings.I18N_LANGUAGE,
            fallback_language=settings.I18N_FALLBACK_LANGUAGE,
        )

        # One client for everyone, one screen state per browser session
        country_client = CountryClient(http_client)
        app.state.countries_sessions = SessionRegistry(
            lambda: CountriesManager(CountryStore(country_client)),
            max_sessions=settings.SESSION_MAX_ACTIVE,
        )

        logger.info("Countries Admin started successfully")

    return start_app


def create_stop_app_handler(app: FastAPI) -> Callable:
    """Create shutdown event handler."""

    async def stop_app() -> None:
        logger.info("Shutting down Countries Admin...")

        http_client = getattr(app.state, "http_client", None)
        if http_client is not None:
            await http_client.aclose()
            logger.info("API client closed")

        logger.info("Countries Admin shutdown complete")

    return stop_app
