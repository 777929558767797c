"""
Appointment Subject

An appointment is booked either for a registered User or for a Guest
identified by name and phone. Exactly one variant, validated on creation.
"""

import frappe
from frappe import _
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from appointment_booking.exceptions import BookingValidationError

GUEST_USER = "Guest"


@dataclass(frozen=True)
class RegisteredUser:
	user: str

	def __post_init__(self):
		if not self.user or self.user == GUEST_USER:
			frappe.throw(_("A registered user is required"), BookingValidationError)

	def as_fields(self) -> Dict[str, Any]:
		return {"user": self.user, "guest_name": None, "guest_phone": None}

	def as_filters(self) -> Dict[str, Any]:
		return {"user": self.user}


@dataclass(frozen=True)
class Guest:
	name: str
	phone: str

	def __post_init__(self):
		if not (self.name or "").strip() or not (self.phone or "").strip():
			frappe.throw(
				_("Guest bookings require both guest name and guest phone"),
				BookingValidationError
			)

	def as_fields(self) -> Dict[str, Any]:
		return {"user": None, "guest_name": self.name, "guest_phone": self.phone}

	def as_filters(self) -> Dict[str, Any]:
		return {"user": ["is", "not set"], "guest_name": self.name, "guest_phone": self.phone}


Subject = Union[RegisteredUser, Guest]


def resolve_subject(
	user: Optional[str] = None,
	guest_name: Optional[str] = None,
	guest_phone: Optional[str] = None
) -> Subject:
	"""
	Determina el sujeto de la cita.

	Un usuario autenticado tiene prioridad; si no hay sesión se exigen
	guest_name y guest_phone.
	"""
	if user and user != GUEST_USER:
		return RegisteredUser(user)

	return Guest((guest_name or "").strip(), (guest_phone or "").strip())
