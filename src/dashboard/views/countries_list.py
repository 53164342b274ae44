"""
Countries table with row actions and a windowed pager.

Pure rendering: the view receives the current page and pagination metadata
and forwards user actions to the callbacks it was given.
"""

from dataclasses import dataclass
from html import escape
from typing import Any, Callable, Optional

from core.i18n import Translator
from schemas.country import Country

MAX_VISIBLE_PAGES = 5

CountryCallback = Callable[[Country], Any]
PageCallback = Callable[[int], Any]


@dataclass
class PageButton:
    """One control of the pager."""

    kind: str  # "prev", "page" or "next"
    page: int
    disabled: bool = False
    current: bool = False

    @property
    def label(self) -> str:
        return str(self.page + 1)


def build_pagination(current_page: int, total_pages: int) -> list[PageButton]:
    """
    Compute the pager controls.

    At most MAX_VISIBLE_PAGES page buttons starting two before the current
    page, never outside [0, total_pages - 1]. Nothing is shown for a single
    page.
    """
    if total_pages <= 1:
        return []

    start = max(0, current_page - MAX_VISIBLE_PAGES // 2)
    end = min(total_pages - 1, start + MAX_VISIBLE_PAGES - 1)

    last_page = total_pages - 1
    buttons = [
        PageButton(
            "prev",
            min(max(0, current_page - 1), last_page),
            disabled=current_page == 0,
        )
    ]
    buttons.extend(
        PageButton("page", page, current=page == current_page) for page in range(start, end + 1)
    )
    buttons.append(
        PageButton(
            "next",
            max(0, min(last_page, current_page + 1)),
            disabled=current_page >= last_page,
        )
    )
    return buttons


def render_status_badge(active: bool, t: Translator) -> str:
    state = "active" if active else "inactive"
    return f'<span class="badge badge-{state}">{escape(t(f"common.{state}"))}</span>'


class CountriesListView:
    """Table of countries for the current page."""

    def __init__(
        self,
        countries: list[Country],
        current_page: int,
        total_pages: int,
        on_view: CountryCallback,
        on_edit: CountryCallback,
        on_delete: CountryCallback,
        on_page_change: PageCallback,
        is_loading: bool = False,
        base_path: str = "/countries",
    ):
        self.countries = countries
        self.current_page = current_page
        self.total_pages = total_pages
        self.on_view = on_view
        self.on_edit = on_edit
        self.on_delete = on_delete
        self.on_page_change = on_page_change
        self.is_loading = is_loading
        self.base_path = base_path

    # Callbacks

    def view(self, country: Country) -> Any:
        return self.on_view(country)

    def edit(self, country: Country) -> Any:
        return self.on_edit(country)

    def delete(self, country: Country) -> Any:
        return self.on_delete(country)

    def change_page(self, page: int) -> Any:
        return self.on_page_change(page)

    # Rendering

    def pagination(self) -> list[PageButton]:
        return build_pagination(self.current_page, self.total_pages)

    def render(self, t: Translator) -> str:
        if self.is_loading:
            return f'<div class="countries-loading"><p>{escape(t("common.loading"))}</p></div>'

        if not self.countries:
            return f'<div class="countries-empty"><p>{escape(t("countries.noCountries"))}</p></div>'

        headers = "".join(
            f"<th>{escape(t(key))}</th>"
            for key in (
                "countries.fields.name",
                "countries.fields.code",
                "countries.fields.isoCode2",
                "countries.fields.cities",
                "common.status",
                "common.actions",
            )
        )
        rows = "".join(self._render_row(country, t) for country in self.countries)

        return (
            '<div class="countries-list">'
            f'<table class="countries-table"><thead><tr>{headers}</tr></thead>'
            f"<tbody>{rows}</tbody></table>"
            f"{self._render_pagination(t)}"
            "</div>"
        )

    def _render_row(self, country: Country, t: Translator) -> str:
        created = country.created_at.date().isoformat()
        cities = f'{len(country.cities)} {t("countries.fields.cities")}'
        actions = "".join(
            self._render_action(country, action, t) for action in ("view", "edit", "delete")
        )
        return (
            f'<tr data-country-id="{country.id}">'
            f'<td><span class="country-avatar">{escape(country.iso_code2)}</span>'
            f'<p class="country-name">{escape(country.name)}</p>'
            f'<p class="country-created">{escape(t("common.createdAt"))}: {created}</p></td>'
            f'<td class="mono">{escape(country.code)}</td>'
            f'<td class="mono">{escape(country.iso_code2)}</td>'
            f"<td>{escape(cities)}</td>"
            f"<td>{render_status_badge(country.active, t)}</td>"
            f'<td class="row-actions">{actions}</td>'
            "</tr>"
        )

    def _render_action(self, country: Country, action: str, t: Translator) -> str:
        title = escape(t(f"common.{action}"))
        return (
            f'<form method="post" action="{self.base_path}/{country.id}/{action}">'
            f'<button type="submit" class="action-{action}" title="{title}">{title}</button>'
            "</form>"
        )

    def _render_pagination(self, t: Translator) -> str:
        buttons = self.pagination()
        if not buttons:
            return ""

        controls = []
        for button in buttons:
            if button.kind == "page":
                label = button.label
                css = "page current" if button.current else "page"
            else:
                label = escape(t("common.previous" if button.kind == "prev" else "common.next"))
                css = button.kind
            disabled = " disabled" if button.disabled else ""
            controls.append(
                f'<form method="post" action="{self.base_path}/page/{button.page}">'
                f'<button type="submit" class="{css}"{disabled}>{label}</button>'
                "</form>"
            )
        return f'<nav class="pagination">{"".join(controls)}</nav>'


def find_country(countries: list[Country], country_id: int) -> Optional[Country]:
    """Look up a country of the current page by id."""
    return next((c for c in countries if c.id == country_id), None)
