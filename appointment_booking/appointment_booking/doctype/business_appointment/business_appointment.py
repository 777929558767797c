# Copyright (c) 2026, Sebastian Ortiz Valencia and contributors
# For license information, please see license.txt

"""
Business Appointment DocType

A booking of a Business Service. Created by the scheduling engine
(scheduling/lifecycle.py) and never deleted by it; its lifecycle is
tracked through status.
"""

import frappe
from frappe import _
from frappe.model.document import Document
from frappe.utils import get_datetime

from appointment_booking.exceptions import BookingValidationError
from appointment_booking.appointment_booking.scheduling.status import parse_status


class BusinessAppointment(Document):
	"""
	Business Appointment with consistency validation.

	Ejecuta:
	1. Validar sujeto: user XOR (guest_name + guest_phone)
	2. Validar consistencia de fechas
	3. Validar que el servicio pertenece al Business
	4. Validar status
	"""

	def validate(self) -> None:
		self._validate_subject()
		self._validate_datetime_consistency()
		self._validate_service_business()
		self._validate_status()

	def _validate_subject(self) -> None:
		"""Exactamente uno: usuario registrado o invitado con nombre y teléfono."""
		has_guest_data = bool(self.guest_name or self.guest_phone)

		if self.user and has_guest_data:
			frappe.throw(
				_("An appointment is booked either for a user or for a guest, not both"),
				BookingValidationError
			)

		if not self.user and not (self.guest_name and self.guest_phone):
			frappe.throw(
				_("Guest bookings require both guest name and guest phone"),
				BookingValidationError
			)

	def _validate_datetime_consistency(self) -> None:
		"""Valida que start_datetime < end_datetime."""
		if not self.start_datetime or not self.end_datetime:
			frappe.throw(_("Start and End are required"))

		if get_datetime(self.start_datetime) >= get_datetime(self.end_datetime):
			frappe.throw(_("Start must be before End"))

	def _validate_service_business(self) -> None:
		service_business = frappe.db.get_value("Business Service", self.service, "business")
		if service_business != self.business:
			frappe.throw(
				_("Service {0} does not belong to Business {1}").format(self.service, self.business)
			)

	def _validate_status(self) -> None:
		self.status = parse_status(self.status or "Pending").value
