"""
Countries admin page endpoints.

GET renders the page; every POST maps one user action onto the
CountriesManager of the caller's session and redirects back to the page
(post/redirect/get). Row actions and paging go through the list view
callbacks.
"""

from typing import Annotated, Optional

import structlog
from fastapi import APIRouter, Depends, Form, Path, status
from fastapi.responses import HTMLResponse, RedirectResponse

from api.deps import get_countries_manager, get_translator, require_country
from core.config import settings
from core.i18n import Translator
from views.countries_manager import CountriesManager
from views.page import CountriesPage

logger = structlog.get_logger(__name__)

router = APIRouter()

Manager = Annotated[CountriesManager, Depends(get_countries_manager)]


def back_to_page() -> RedirectResponse:
    return RedirectResponse(url="/countries", status_code=status.HTTP_303_SEE_OTHER)


def parse_active_filter(value: str) -> Optional[bool]:
    """Map the status select ("", "true", "false") to a filter value."""
    if value == "":
        return None
    return value == "true"


def form_values(name: str, code: str, iso_code2: str, active: Optional[str]) -> dict:
    # Unchecked checkboxes are not posted
    return {"name": name, "code": code, "iso_code2": iso_code2, "active": active or ""}


# ============================================================================
# Page
# ============================================================================


@router.get("", response_class=HTMLResponse)
async def countries_page(
    manager: Manager,
    t: Annotated[Translator, Depends(get_translator)],
) -> HTMLResponse:
    """Render the countries page, loading the first page on first visit."""
    if not manager.is_mounted:
        await manager.mount()
    page = CountriesPage(manager, t, back_url=settings.DASHBOARD_URL)
    return HTMLResponse(page.render())


# ============================================================================
# Filters and paging
# ============================================================================


@router.post("/search")
async def search(
    manager: Manager,
    search_term: Annotated[str, Form(alias="search")] = "",
    active: Annotated[str, Form()] = "",
) -> RedirectResponse:
    manager.set_search_term(search_term)
    manager.set_active_filter(parse_active_filter(active))
    await manager.handle_search()
    return back_to_page()


@router.post("/reset")
async def reset(manager: Manager) -> RedirectResponse:
    await manager.reset_filters()
    return back_to_page()


@router.post("/page/{page}")
async def change_page(manager: Manager, page: Annotated[int, Path(ge=0)]) -> RedirectResponse:
    await manager.list_view().change_page(page)
    return back_to_page()


# ============================================================================
# Create
# ============================================================================


@router.post("/create/open")
async def open_create(manager: Manager) -> RedirectResponse:
    manager.open_create_modal()
    return back_to_page()


@router.post("/create/cancel")
async def cancel_create(manager: Manager) -> RedirectResponse:
    manager.close_create_modal()
    return back_to_page()


@router.post("/create")
async def create(
    manager: Manager,
    name: Annotated[str, Form()] = "",
    code: Annotated[str, Form()] = "",
    iso_code2: Annotated[str, Form()] = "",
    active: Annotated[Optional[str], Form()] = None,
) -> RedirectResponse:
    await manager.submit_create_form(form_values(name, code, iso_code2, active))
    return back_to_page()


# ============================================================================
# Edit
# ============================================================================


@router.post("/edit/cancel")
async def cancel_edit(manager: Manager) -> RedirectResponse:
    manager.close_edit_modal()
    return back_to_page()


@router.post("/edit")
async def edit(
    manager: Manager,
    name: Annotated[str, Form()] = "",
    code: Annotated[str, Form()] = "",
    iso_code2: Annotated[str, Form()] = "",
    active: Annotated[Optional[str], Form()] = None,
) -> RedirectResponse:
    await manager.submit_edit_form(form_values(name, code, iso_code2, active))
    return back_to_page()


@router.post("/{country_id:int}/edit")
async def open_edit(manager: Manager, country_id: int) -> RedirectResponse:
    manager.list_view().edit(require_country(manager, country_id))
    return back_to_page()


# ============================================================================
# View
# ============================================================================


@router.post("/view/close")
async def close_view(manager: Manager) -> RedirectResponse:
    manager.close_view_modal()
    return back_to_page()


@router.post("/{country_id:int}/view")
async def open_view(manager: Manager, country_id: int) -> RedirectResponse:
    await manager.list_view().view(require_country(manager, country_id))
    return back_to_page()


# ============================================================================
# Delete
# ============================================================================


@router.post("/delete/confirm")
async def confirm_delete(manager: Manager) -> RedirectResponse:
    await manager.confirm_delete()
    return back_to_page()


@router.post("/delete/cancel")
async def cancel_delete(manager: Manager) -> RedirectResponse:
    await manager.cancel_delete()
    return back_to_page()


@router.post("/{country_id:int}/delete")
async def request_delete(manager: Manager, country_id: int) -> RedirectResponse:
    country = require_country(manager, country_id)
    logger.info("country_delete_requested", country_id=country.id)
    await manager.list_view().delete(country)
    return back_to_page()


# ============================================================================
# Errors
# ============================================================================


@router.post("/error/dismiss")
async def dismiss_error(manager: Manager) -> RedirectResponse:
    manager.dismiss_error()
    return back_to_page()
