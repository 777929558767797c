"""
Appointment Status

Closed set of appointment states and the allowed transitions between them.
"""

import frappe
from frappe import _
from enum import Enum
from typing import Dict, FrozenSet, Union

from appointment_booking.exceptions import BookingValidationError


class AppointmentStatus(str, Enum):
	PENDING = "Pending"
	CONFIRMED = "Confirmed"
	CANCELLED = "Cancelled"
	COMPLETED = "Completed"


# Pending -> Confirmed/Cancelled, Confirmed -> Cancelled/Completed.
# Cancelled y Completed son terminales.
TRANSITIONS: Dict[AppointmentStatus, FrozenSet[AppointmentStatus]] = {
	AppointmentStatus.PENDING: frozenset({AppointmentStatus.CONFIRMED, AppointmentStatus.CANCELLED}),
	AppointmentStatus.CONFIRMED: frozenset({AppointmentStatus.CANCELLED, AppointmentStatus.COMPLETED}),
	AppointmentStatus.CANCELLED: frozenset(),
	AppointmentStatus.COMPLETED: frozenset(),
}

# Estados que ocupan capacidad del Business
BLOCKING_STATUSES = (AppointmentStatus.PENDING, AppointmentStatus.CONFIRMED)


def parse_status(value: Union[str, AppointmentStatus]) -> AppointmentStatus:
	"""Convierte un string ("Confirmed" o "CONFIRMED") a AppointmentStatus."""
	if isinstance(value, AppointmentStatus):
		return value

	text = str(value or "").strip()
	for status in AppointmentStatus:
		if text in (status.value, status.name):
			return status

	frappe.throw(
		_("Invalid status '{0}'. Use one of: {1}").format(
			value, ", ".join(s.value for s in AppointmentStatus)
		),
		BookingValidationError
	)


def can_transition(current: Union[str, AppointmentStatus], target: Union[str, AppointmentStatus]) -> bool:
	return parse_status(target) in TRANSITIONS[parse_status(current)]


def is_terminal(status: Union[str, AppointmentStatus]) -> bool:
	return not TRANSITIONS[parse_status(status)]
