"""
Countries screen orchestration.

Owns UI-only state (open modal, edit/view target, draft filters) and maps
user actions onto CountryStore actions. Draft filters are what the user is
typing; committed filters are what was last queried. Every commit of the
filter object triggers a fetch.
"""

import asyncio
from html import escape
from typing import Any, Optional

import structlog

from core.i18n import Translator
from schemas.country import Country, CountryFilters, CreateCountryRequest
from services.country_store import DEFAULT_PAGE_SIZE, CountryStore
from views.confirm_dialog import ConfirmDialog
from views.countries_list import CountriesListView, find_country, render_status_badge
from views.country_form import CountryForm

logger = structlog.get_logger(__name__)


def initial_filters() -> CountryFilters:
    return CountryFilters(page=0, size=DEFAULT_PAGE_SIZE)


class CountriesManager:
    """Glue between the countries store and its UI components."""

    def __init__(
        self,
        store: CountryStore,
        confirm_dialog: Optional[ConfirmDialog] = None,
        base_path: str = "/countries",
    ):
        self.store = store
        self.confirm_dialog = confirm_dialog or ConfirmDialog()
        self.base_path = base_path

        # Modals
        self.is_create_modal_open = False
        self.is_edit_modal_open = False
        self.is_view_modal_open = False
        self.editing_country: Optional[Country] = None
        self.create_form: Optional[CountryForm] = None
        self.edit_form: Optional[CountryForm] = None

        # Filters
        self.filters = initial_filters()
        self.search_term = ""
        self.active_filter: Optional[bool] = None

        self.is_mounted = False
        self._pending_delete: Optional[asyncio.Task] = None

    # =========================================================================
    # Filters and paging
    # =========================================================================

    async def mount(self) -> None:
        """Initial load with the committed filters."""
        self.is_mounted = True
        await self.store.fetch_countries(self.filters)

    async def _commit_filters(self, filters: CountryFilters) -> None:
        self.filters = filters
        await self.store.fetch_countries(filters)

    def set_search_term(self, value: str) -> None:
        self.search_term = value

    def set_active_filter(self, value: Optional[bool]) -> None:
        self.active_filter = value

    async def handle_search(self) -> None:
        """Apply the draft search term and status, back on the first page."""
        await self._commit_filters(
            self.filters.model_copy(
                update={
                    "name": self.search_term or None,
                    "active": self.active_filter,
                    "page": 0,
                }
            )
        )

    async def handle_page_change(self, page: int) -> None:
        await self._commit_filters(self.filters.model_copy(update={"page": page}))

    async def reset_filters(self) -> None:
        self.search_term = ""
        self.active_filter = None
        await self._commit_filters(initial_filters())

    # =========================================================================
    # Create / edit / view
    # =========================================================================

    def open_create_modal(self) -> None:
        self.create_form = CountryForm(
            on_submit=self.handle_create_country,
            on_cancel=self.close_create_modal,
        )
        self.is_create_modal_open = True

    def close_create_modal(self) -> None:
        self.is_create_modal_open = False
        self.create_form = None

    async def handle_create_country(self, data: CreateCountryRequest) -> None:
        success = await self.store.create_country(data)
        if success:
            self.close_create_modal()

    async def submit_create_form(self, values: dict[str, Any]) -> bool:
        """Feed posted values into the create form and submit it."""
        if not self.is_create_modal_open or self.create_form is None:
            return False
        self.create_form.update(values)
        return await self.create_form.submit()

    def handle_edit_click(self, country: Country) -> None:
        self.editing_country = country
        self.edit_form = CountryForm(
            on_submit=self.handle_edit_country,
            on_cancel=self.close_edit_modal,
            initial=country,
        )
        self.is_edit_modal_open = True

    def close_edit_modal(self) -> None:
        self.is_edit_modal_open = False
        self.editing_country = None
        self.edit_form = None

    async def handle_edit_country(self, data: CreateCountryRequest) -> None:
        if self.editing_country is None:
            return

        success = await self.store.update_country(self.editing_country.id, data)
        if success:
            self.close_edit_modal()

    async def submit_edit_form(self, values: dict[str, Any]) -> bool:
        """Feed posted values into the edit form and submit it."""
        if not self.is_edit_modal_open or self.edit_form is None:
            return False
        self.edit_form.update(values)
        return await self.edit_form.submit()

    async def handle_view_click(self, country: Country) -> None:
        await self.store.fetch_country_by_id(country.id)
        self.is_view_modal_open = True

    def close_view_modal(self) -> None:
        self.is_view_modal_open = False

    # =========================================================================
    # Delete
    # =========================================================================

    async def handle_delete_country(self, country: Country) -> bool:
        """Ask for confirmation, then delete. Returns True if deleted."""
        confirmed = await self.confirm_dialog.ask("countries.confirmDelete", name=country.name)
        if not confirmed:
            logger.debug("country_delete_cancelled", country_id=country.id)
            return False
        return await self.store.delete_country(country.id)

    async def request_delete(self, country: Country) -> None:
        """Open the confirmation without waiting for the answer."""
        self._pending_delete = asyncio.create_task(self.handle_delete_country(country))
        # Let the task reach the dialog before returning
        await asyncio.sleep(0)

    async def _finish_delete(self, confirmed: bool) -> bool:
        task, self._pending_delete = self._pending_delete, None
        self.confirm_dialog.resolve(confirmed)
        if task is None:
            return False
        return await task

    async def confirm_delete(self) -> bool:
        return await self._finish_delete(True)

    async def cancel_delete(self) -> bool:
        return await self._finish_delete(False)

    # =========================================================================
    # Misc
    # =========================================================================

    def dismiss_error(self) -> None:
        self.store.clear_error()

    def find_country(self, country_id: int) -> Optional[Country]:
        """Find a country on the current page (or the selected one)."""
        state = self.store.state
        country = find_country(state.countries, country_id)
        if country is None and state.selected_country and state.selected_country.id == country_id:
            country = state.selected_country
        return country

    def list_view(self) -> CountriesListView:
        state = self.store.state
        return CountriesListView(
            countries=state.countries,
            current_page=state.current_page,
            total_pages=state.total_pages,
            on_view=self.handle_view_click,
            on_edit=self.handle_edit_click,
            on_delete=self.request_delete,
            on_page_change=self.handle_page_change,
            is_loading=state.is_loading,
            base_path=self.base_path,
        )

    # =========================================================================
    # Rendering
    # =========================================================================

    def render(self, t: Translator) -> str:
        state = self.store.state
        base = self.base_path

        header = (
            '<div class="countries-header"><div>'
            f'<h2>{escape(t("countries.title"))}</h2>'
            f'<p>{escape(t("countries.subtitle"))}</p></div>'
            f'<form method="post" action="{base}/create/open">'
            f'<button type="submit" class="create">+ {escape(t("countries.createCountry"))}</button>'
            "</form></div>"
        )

        error = ""
        if state.error:
            error = (
                '<div class="error-banner" role="alert">'
                f"<p>{escape(state.error)}</p>"
                f'<form method="post" action="{base}/error/dismiss">'
                '<button type="submit" class="dismiss">&times;</button></form></div>'
            )

        parts = [
            header,
            error,
            self._render_filters(t),
            f'<section class="countries-panel">{self.list_view().render(t)}</section>',
        ]

        if self.is_create_modal_open and self.create_form is not None:
            parts.append(
                self._render_modal(
                    t("countries.createCountry"),
                    self.create_form.render(t, f"{base}/create", f"{base}/create/cancel", state.is_loading),
                )
            )
        if self.is_edit_modal_open and self.editing_country and self.edit_form is not None:
            parts.append(
                self._render_modal(
                    t("countries.editCountry"),
                    self.edit_form.render(t, f"{base}/edit", f"{base}/edit/cancel", state.is_loading),
                )
            )
        if self.is_view_modal_open and state.selected_country:
            parts.append(self._render_view_modal(state.selected_country, t))

        parts.append(
            self.confirm_dialog.render(t, f"{base}/delete/confirm", f"{base}/delete/cancel")
        )
        return f'<div class="countries-manager">{"".join(parts)}</div>'

    def _render_filters(self, t: Translator) -> str:
        options = []
        for value, key in (("", "common.all"), ("true", "common.active"), ("false", "common.inactive")):
            current = "" if self.active_filter is None else str(self.active_filter).lower()
            selected = " selected" if value == current else ""
            options.append(f'<option value="{value}"{selected}>{escape(t(key))}</option>')

        return (
            '<section class="countries-filters">'
            f'<h3>{escape(t("common.filters"))}</h3>'
            f'<form method="post" action="{self.base_path}/search">'
            f'<label>{escape(t("common.search"))}'
            f'<input type="text" name="search" value="{escape(self.search_term)}"'
            f' placeholder="{escape(t("countries.searchPlaceholder"))}"></label>'
            f'<label>{escape(t("common.status"))}<select name="active">{"".join(options)}</select></label>'
            f'<button type="submit" class="search">{escape(t("common.search"))}</button>'
            f'<button type="submit" formaction="{self.base_path}/reset" class="reset">'
            f'{escape(t("common.reset"))}</button>'
            "</form></section>"
        )

    @staticmethod
    def _render_modal(title: str, body: str) -> str:
        return f'<div class="modal"><h3>{escape(title)}</h3>{body}</div>'

    def _render_view_modal(self, country: Country, t: Translator) -> str:
        cities = f'{len(country.cities)} {t("countries.fields.cities")}'
        return (
            '<div class="modal view-modal">'
            f'<h3>{escape(t("countries.viewCountry"))}</h3>'
            f'<form method="post" action="{self.base_path}/view/close">'
            '<button type="submit" class="close">&times;</button></form>'
            f'<div class="country-summary"><span class="country-avatar">{escape(country.iso_code2)}</span>'
            f"<h4>{escape(country.name)}</h4><p>{escape(country.code)}</p></div>"
            "<dl>"
            f'<dt>{escape(t("countries.fields.isoCode2"))}</dt><dd class="mono">{escape(country.iso_code2)}</dd>'
            f'<dt>{escape(t("common.status"))}</dt><dd>{render_status_badge(country.active, t)}</dd>'
            f'<dt>{escape(t("countries.fields.cities"))}</dt><dd>{escape(cities)}</dd>'
            f'<dt>{escape(t("common.createdAt"))}</dt><dd>{country.created_at.isoformat(sep=" ")}</dd>'
            f'<dt>{escape(t("common.updatedAt"))}</dt><dd>{country.updated_at.isoformat(sep=" ")}</dd>'
            "</dl></div>"
        )
