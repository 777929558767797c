"""
Booking Exceptions

Error taxonomy for the scheduling engine. Every class extends Frappe's
exception hierarchy so the request layer maps them to HTTP status codes
without extra handling.
"""

import frappe


class BookingValidationError(frappe.ValidationError):
	"""Malformed input (bad time format, missing guest info, unknown status)."""


class TimeFormatError(BookingValidationError):
	pass


class WorkingHoursError(BookingValidationError):
	pass


class InvalidTransitionError(BookingValidationError):
	pass


class NotFoundError(frappe.DoesNotExistError):
	"""Business, service or appointment absent, or not owned by the caller."""


class NotConfiguredError(BookingValidationError):
	"""Business has no working hours."""


class OutOfHoursError(BookingValidationError):
	"""Requested window falls outside the business working hours."""


class SlotTakenError(BookingValidationError):
	"""Requested window overlaps a blocking appointment."""

	http_status_code = 409


class PolicyViolationError(BookingValidationError):
	"""Cancellation requested inside the closed cancellation window."""

	http_status_code = 403
