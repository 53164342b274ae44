"""
Create/edit form for a country.

Values are held by the form and validated only on submit. Error messages
are message keys resolved at render time.
"""

import inspect
from html import escape
from typing import Any, Awaitable, Callable, Optional, Union

from core.i18n import Translator
from schemas.country import Country, CreateCountryRequest

SubmitCallback = Callable[[CreateCountryRequest], Union[Awaitable[Any], Any]]
CancelCallback = Callable[[], Any]

TEXT_FIELDS = ("name", "code", "iso_code2")
FIELDS = TEXT_FIELDS + ("active",)

# Form field -> message key suffix
_FIELD_KEYS = {"name": "name", "code": "code", "iso_code2": "isoCode2", "active": "active"}
_MAX_LENGTHS = {"code": 3, "iso_code2": 2}
_TRUE_STRINGS = {"true", "on", "1", "yes"}


def parse_active(value: Any) -> bool:
    """Read a checkbox or select value; strings are parsed, not truth-tested."""
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return bool(value)


class CountryForm:
    """Controlled form producing a CreateCountryRequest."""

    def __init__(
        self,
        on_submit: SubmitCallback,
        on_cancel: CancelCallback,
        initial: Optional[Country] = None,
    ):
        self.on_submit = on_submit
        self.on_cancel = on_cancel
        self.initial = initial
        self.values: dict[str, Any] = {"name": "", "code": "", "iso_code2": "", "active": True}
        self.errors: dict[str, str] = {}

        if initial is not None:
            self.values = {
                "name": initial.name,
                "code": initial.code,
                "iso_code2": initial.iso_code2,
                "active": initial.active,
            }

    @property
    def is_edit(self) -> bool:
        return self.initial is not None

    def change(self, field: str, value: Any) -> None:
        """Set a field value, clearing only that field's error."""
        if field not in FIELDS:
            raise KeyError(f"Unknown country form field: {field}")
        self.values[field] = parse_active(value) if field == "active" else value
        self.errors.pop(field, None)

    def update(self, values: dict[str, Any]) -> None:
        """Apply several field changes at once."""
        for field, value in values.items():
            self.change(field, value)

    def validate(self) -> bool:
        """Check every field, replacing the previous errors."""
        errors: dict[str, str] = {}

        if not self.values["name"].strip():
            errors["name"] = "countries.validation.nameRequired"

        if not self.values["code"].strip():
            errors["code"] = "countries.validation.codeRequired"
        elif len(self.values["code"]) != 3:
            errors["code"] = "countries.validation.codeLength"

        if not self.values["iso_code2"].strip():
            errors["iso_code2"] = "countries.validation.isoCode2Required"
        elif len(self.values["iso_code2"]) != 2:
            errors["iso_code2"] = "countries.validation.isoCode2Length"

        self.errors = errors
        return not errors

    def payload(self) -> CreateCountryRequest:
        return CreateCountryRequest(
            name=self.values["name"],
            code=self.values["code"],
            iso_code2=self.values["iso_code2"],
            active=self.values["active"],
        )

    async def submit(self) -> bool:
        """
        Validate and hand the payload to on_submit.

        Returns:
            True if validation passed and on_submit was called
        """
        if not self.validate():
            return False

        result = self.on_submit(self.payload())
        if inspect.isawaitable(result):
            await result
        return True

    def cancel(self) -> Any:
        return self.on_cancel()

    # =========================================================================
    # Rendering
    # =========================================================================

    def render(self, t: Translator, action: str, cancel_action: str, is_loading: bool = False) -> str:
        disabled = " disabled" if is_loading else ""
        fields = "".join(self._render_text_field(field, t, disabled) for field in TEXT_FIELDS)

        checked = " checked" if self.values["active"] else ""
        active_field = (
            '<div class="form-field"><label>'
            f'<input type="checkbox" name="active" value="true"{checked}{disabled}>'
            f'<span>{escape(t("countries.fields.active"))}</span></label></div>'
        )

        if is_loading:
            submit_label = t("common.loading")
        else:
            submit_label = t("common.update" if self.is_edit else "common.create")

        return (
            f'<form class="country-form" method="post" action="{escape(action)}">'
            f"{fields}{active_field}"
            '<div class="form-actions">'
            f'<button type="submit" formaction="{escape(cancel_action)}" class="cancel"{disabled}>'
            f'{escape(t("common.cancel"))}</button>'
            f'<button type="submit" class="submit"{disabled}>{escape(submit_label)}</button>'
            "</div></form>"
        )

    def _render_text_field(self, field: str, t: Translator, disabled: str) -> str:
        key = _FIELD_KEYS[field]
        error = self.errors.get(field)
        css = "input error" if error else "input"
        max_length = f' maxlength="{_MAX_LENGTHS[field]}"' if field in _MAX_LENGTHS else ""
        error_html = f'<p class="field-error">{escape(t(error))}</p>' if error else ""
        return (
            '<div class="form-field">'
            f'<label for="{field}">{escape(t(f"countries.fields.{key}"))} *</label>'
            f'<input type="text" id="{field}" name="{field}" class="{css}"'
            f' value="{escape(str(self.values[field]))}"{max_length}'
            f' placeholder="{escape(t(f"countries.placeholders.{key}"))}"{disabled}>'
            f"{error_html}</div>"
        )
