# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Registration form layout: field refs, submit refs and the fill/submit steps."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..errors import AdapterError
from ..models.registration import Identity
from .adapter import FieldActionAdapter

logger = logging.getLogger(__name__)

REGISTER_PATH = "register.htm"


@dataclass(frozen=True)
class FormField:
    """One input, the ``Identity`` attribute it takes, and refs to try in order."""

    name: str
    attribute: str
    refs: tuple[str, ...]

    def value_for(self, identity: Identity) -> str:
        return str(getattr(identity, self.attribute))


def _field(name: str, attribute: str, input_name: str, element_id: str | None = None) -> FormField:
    element_id = element_id or input_name
    escaped = element_id.replace(".", "\\.")
    return FormField(name=name, attribute=attribute, refs=(f'input[name="{input_name}"]', f"#{escaped}"))


REGISTRATION_FIELDS: tuple[FormField, ...] = (
    _field("firstName", "first_name", "customer.firstName"),
    _field("lastName", "last_name", "customer.lastName"),
    _field("address", "address", "customer.address.street"),
    _field("city", "city", "customer.address.city"),
    _field("state", "state", "customer.address.state"),
    _field("zipCode", "zip_code", "customer.address.zipCode"),
    _field("phoneNumber", "phone_number", "customer.phoneNumber"),
    _field("ssn", "ssn", "customer.ssn"),
    _field("username", "username", "customer.username"),
    _field("password", "password", "customer.password"),
    _field("confirmPassword", "password", "repeatedPassword"),
)

SUBMIT_REFS: tuple[str, ...] = (
    'input[value="Register"]',
    'button:has-text("Register")',
    'input[type="submit"]',
)


@dataclass(frozen=True)
class RegistrationForm:
    path: str = REGISTER_PATH
    fields: tuple[FormField, ...] = REGISTRATION_FIELDS
    submit_refs: tuple[str, ...] = SUBMIT_REFS

    def open(self, adapter: FieldActionAdapter) -> None:
        adapter.navigate(self.path)

    def fill(self, adapter: FieldActionAdapter, identity: Identity) -> None:
        for form_field in self.fields:
            fill_field(adapter, form_field, form_field.value_for(identity))

    def submit(self, adapter: FieldActionAdapter) -> str:
        """Click the first visible submit ref and return it."""
        for ref in self.submit_refs:
            if adapter.is_visible(ref):
                adapter.submit(ref)
                logger.debug("Registration submitted using %s", ref)
                return ref
        raise AdapterError("submit", None, "no visible registration submit control")


def fill_field(adapter: FieldActionAdapter, form_field: FormField, value: str) -> str:
    """Fill ``form_field`` through the first ref that accepts ``value``; return that ref."""
    for ref in form_field.refs:
        if adapter.fill(ref, value):
            return ref
        logger.debug("Could not fill %s via %s", form_field.name, ref)
    raise AdapterError("fill", form_field.name, "no candidate ref accepted the value")


DEFAULT_FORM = RegistrationForm()

__all__ = [
    "DEFAULT_FORM",
    "FormField",
    "REGISTER_PATH",
    "REGISTRATION_FIELDS",
    "RegistrationForm",
    "SUBMIT_REFS",
    "fill_field",
]
