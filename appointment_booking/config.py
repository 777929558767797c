"""
Site configuration for Appointment Booking.

Values are read from site_config.json (frappe.conf):

	{
		"appointment_booking_timezone": "America/Bogota",
		"appointment_booking_cancellation_window_hours": 2,
		"appointment_booking_rate_limits": {"create_appointment": [5, 60]}
	}
"""

import frappe
from frappe.utils import flt
from typing import Optional, Tuple

DEFAULT_CANCELLATION_WINDOW_HOURS = 2

DEFAULT_RATE_LIMITS = {
	"get_available_slots": (30, 60),
	"create_appointment": (5, 60),
	"cancel_appointment": (5, 60),
	"update_appointment_status": (20, 60),
	"get_my_appointments": (30, 60),
	"get_business_appointments": (30, 60),
	"get_business_dashboard": (30, 60),
}


def get_default_timezone() -> str:
	"""Operating timezone for businesses without their own timezone."""
	tz_name = frappe.conf.get("appointment_booking_timezone")
	if tz_name:
		return tz_name

	return frappe.utils.get_system_timezone() or "UTC"


def get_business_timezone_name(business) -> str:
	tz_name = business.get("timezone") if business else None
	return tz_name or get_default_timezone()


def get_cancellation_window_hours() -> float:
	value = frappe.conf.get("appointment_booking_cancellation_window_hours")
	if value is None:
		return DEFAULT_CANCELLATION_WINDOW_HOURS
	return flt(value)


def get_rate_limit(action: str) -> Tuple[int, int]:
	"""Returns (limit, seconds) for a rate limited action."""
	overrides: Optional[dict] = frappe.conf.get("appointment_booking_rate_limits") or {}
	if action in overrides:
		limit, seconds = overrides[action]
		return int(limit), int(seconds)
	return DEFAULT_RATE_LIMITS.get(action, (10, 60))
