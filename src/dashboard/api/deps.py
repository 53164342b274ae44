"""
Shared dependencies for the countries routes.

The session registry and translator are built once per application at
startup and read back from app.state here, so tests can override them.
"""

from fastapi import HTTPException, Request, status

from core.config import settings
from core.i18n import Translator
from schemas.country import Country
from views.countries_manager import CountriesManager


def get_countries_manager(request: Request) -> CountriesManager:
    """Return the countries manager of the caller's session."""
    sessions = getattr(request.app.state, "countries_sessions", None)
    if sessions is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Countries screen is not initialized",
        )

    session_id = getattr(request.state, "session_id", None) or request.cookies.get(
        settings.SESSION_COOKIE_NAME
    )
    if not session_id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Missing session",
        )
    return sessions.get(session_id)


def get_translator(request: Request) -> Translator:
    """Return the shared translator, falling back to key passthrough."""
    return getattr(request.app.state, "translator", None) or Translator()


def require_country(manager: CountriesManager, country_id: int) -> Country:
    """
    Resolve a row action target.

    Raises:
        HTTPException: If the country is not on the current page.
    """
    country = manager.find_country(country_id)
    if country is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Country {country_id} is not on the current page",
        )
    return country
