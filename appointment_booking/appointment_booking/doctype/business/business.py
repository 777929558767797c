# Copyright (c) 2026, Sebastian Ortiz Valencia and contributors
# For license information, please see license.txt

"""
Business DocType

A bookable business with its daily working hours and operating timezone.
"""

import frappe
from frappe import _
from frappe.model.document import Document

from appointment_booking.appointment_booking.scheduling.timeutils import get_timezone
from appointment_booking.appointment_booking.scheduling.working_hours import (
	format_working_hours,
	parse_working_hours,
)


class Business(Document):
	"""
	Business with validation for scheduling settings.

	Validations:
	- business_owner defaults to the current session user
	- business_name unique per owner
	- working_hours "HH:mm-HH:mm" with open < close (normalized)
	- timezone must be a valid tz database name
	"""

	def validate(self) -> None:
		self._set_default_owner()
		self._validate_unique_name_per_owner()
		self._validate_working_hours()
		self._validate_timezone()

	def _set_default_owner(self) -> None:
		if not self.business_owner:
			self.business_owner = frappe.session.user

	def _validate_unique_name_per_owner(self) -> None:
		"""Un mismo dueño no puede tener dos Business con el mismo nombre."""
		duplicate = frappe.db.exists(
			"Business",
			{
				"business_name": self.business_name,
				"business_owner": self.business_owner,
				"name": ["!=", self.name],
			},
		)
		if duplicate:
			frappe.throw(
				_("Business with the same name already exists"),
				frappe.DuplicateEntryError
			)

	def _validate_working_hours(self) -> None:
		"""Parsea y normaliza working_hours (vacío = sin configurar)."""
		if not self.working_hours:
			return

		open_minutes, close_minutes = parse_working_hours(self.working_hours)
		self.working_hours = format_working_hours(open_minutes, close_minutes)

	def _validate_timezone(self) -> None:
		if self.timezone:
			self.timezone = self.timezone.strip()
			get_timezone(self.timezone)
