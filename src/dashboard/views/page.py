"""Countries page chrome: document shell, back navigation and title."""

from html import escape

from core.i18n import Translator
from views.countries_manager import CountriesManager


class CountriesPage:
    """Top-level wrapper around the countries manager."""

    def __init__(self, manager: CountriesManager, translator: Translator, back_url: str = "/"):
        self.manager = manager
        self.t = translator
        self.back_url = back_url

    def render(self) -> str:
        t = self.t
        return (
            "<!DOCTYPE html>"
            '<html><head><meta charset="utf-8">'
            '<meta name="viewport" content="width=device-width, initial-scale=1.0">'
            f'<title>{escape(t("countries.title"))}</title></head>'
            '<body><div class="container">'
            f'<nav class="page-nav"><a href="{escape(self.back_url)}" class="back">'
            f'&larr; {escape(t("common.back"))}</a></nav>'
            f"<main>{self.manager.render(t)}</main>"
            "</div></body></html>"
        )
