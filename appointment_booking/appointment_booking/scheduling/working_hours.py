"""
Working Hours Parser

Parses the business working-hours string ("HH:mm-HH:mm") into a pair of
minutes since local midnight.
"""

import re
import frappe
from frappe import _
from typing import Any, Tuple

from appointment_booking.exceptions import NotConfiguredError, WorkingHoursError
from .timeutils import to_minutes_of_day, format_minutes

WORKING_HOURS_RE = re.compile(r"^((?:[01]\d|2[0-3]):[0-5]\d)-((?:[01]\d|2[0-3]):[0-5]\d)$")


def parse_working_hours(value: str) -> Tuple[int, int]:
	"""
	Parsea "HH:mm-HH:mm" a (open_minutes, close_minutes).

	Args:
		value: rango de horario laboral, ej. "09:00-18:00"

	Returns:
		tuple: (open_minutes, close_minutes) con open < close

	Raises:
		WorkingHoursError: forma inválida u open >= close
	"""
	match = WORKING_HOURS_RE.match(str(value or "").strip())
	if not match:
		frappe.throw(
			_("Invalid working hours '{0}'. The format should be 09:00-18:00").format(value),
			WorkingHoursError
		)

	open_minutes = to_minutes_of_day(match.group(1))
	close_minutes = to_minutes_of_day(match.group(2))

	if open_minutes >= close_minutes:
		frappe.throw(
			_("Working hours must open before they close: {0}").format(value),
			WorkingHoursError
		)

	return open_minutes, close_minutes


def format_working_hours(open_minutes: int, close_minutes: int) -> str:
	"""(540, 1080) -> "09:00-18:00"."""
	return f"{format_minutes(open_minutes)}-{format_minutes(close_minutes)}"


def get_business_hours(business: Any) -> Tuple[int, int]:
	"""
	Horario laboral de un Business.

	Raises:
		NotConfiguredError: si el Business no tiene working_hours
	"""
	working_hours = business.get("working_hours")
	if not working_hours:
		frappe.throw(
			_("Business '{0}' has no working hours configured").format(business.get("name")),
			NotConfiguredError
		)

	return parse_working_hours(working_hours)
