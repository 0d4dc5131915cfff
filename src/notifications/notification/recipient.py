"""Recipient value object: who a notification is addressed to."""

import re
from enum import Enum

from protean import invariant
from protean.fields import String

from hyre.domain import hyre
from notifications.notification.errors import InvalidRecipientError

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_PATTERN = re.compile(r"^\+?[\d\s\-()]{10,}$")


class RecipientRole(Enum):
    CUSTOMER = "CUSTOMER"
    CHAUFFEUR = "CHAUFFEUR"
    FLEET_OWNER = "FLEET_OWNER"

    @classmethod
    def from_user_role(cls, role: str | None) -> "RecipientRole":
        """Map an identity role name onto a recipient role; anything unknown is a customer."""
        normalized = (role or "").strip().lower()
        if normalized in ("fleetowner", "fleet_owner"):
            return cls.FLEET_OWNER
        if normalized == "chauffeur":
            return cls.CHAUFFEUR
        return cls.CUSTOMER


def _clean(value) -> str | None:
    if value is None:
        return None
    return str(value).strip() or None


@hyre.value_object
class Recipient:
    id: String(required=True, max_length=255)
    name: String(required=True, max_length=255, sanitize=False)
    role: String(choices=RecipientRole, required=True)
    email: String(max_length=254)
    phone: String(max_length=50)

    @invariant.post
    def must_be_reachable(self):
        if not self.email and not self.phone:
            raise InvalidRecipientError("Recipient must have either email or phone number")
        if self.email and not EMAIL_PATTERN.match(self.email):
            raise InvalidRecipientError("Invalid email format")
        if self.phone and not PHONE_PATTERN.match(self.phone):
            raise InvalidRecipientError("Invalid phone number format")

    @classmethod
    def build(cls, id, name, role, email=None, phone=None) -> "Recipient":
        """Trim every value, treat blank contact details as missing and validate."""
        for field_name, value in (("id", id), ("name", name)):
            if not _clean(value):
                raise InvalidRecipientError(f"Recipient {field_name} cannot be empty")
        return cls(
            id=_clean(id),
            name=_clean(name),
            role=RecipientRole(role).value,
            email=_clean(email),
            phone=_clean(phone),
        )

    def has_email(self) -> bool:
        return bool(self.email)

    def has_phone(self) -> bool:
        return bool(self.phone)

    def is_customer(self) -> bool:
        return self.role == RecipientRole.CUSTOMER.value

    def is_chauffeur(self) -> bool:
        return self.role == RecipientRole.CHAUFFEUR.value

    def is_fleet_owner(self) -> bool:
        return self.role == RecipientRole.FLEET_OWNER.value

    def __str__(self) -> str:
        return f"{self.name} ({self.role})"
