"""
Tests for api/appointments and api/shared

Tests request validators, security helpers and whitelisted endpoints.
"""

import unittest
from unittest.mock import patch
import frappe
from datetime import datetime
import pytz

from appointment_booking.exceptions import NotFoundError, SlotTakenError
from appointment_booking.api.appointments import (
	cancel_appointment,
	create_appointment,
	get_available_slots,
	get_business_appointments,
	get_business_dashboard,
	get_my_appointments,
	update_appointment_status,
)
from appointment_booking.api.appointments.endpoints import appointment_payload
from appointment_booking.api.shared import (
	check_honeypot,
	get_session_user,
	require_login,
	sanitize_string,
	validate_date_string,
	validate_docname,
	validate_guest_phone,
	validate_iso_datetime,
)
from appointment_booking.appointment_booking.doctype.business.test_business import make_business
from appointment_booking.appointment_booking.doctype.business_service.test_business_service import make_service

OTHER_USER = "booking-api-tester@example.com"
START = "2099-01-15T09:00:00+00:00"


class TestValidators(unittest.TestCase):
	"""Tests for request parameter validators."""

	def test_date_string(self):
		self.assertEqual(validate_date_string(" 2030-01-15 "), "2030-01-15")

		for value in ("15/01/2030", "2030-1-15", "", None):
			with self.assertRaises(frappe.ValidationError, msg=value):
				validate_date_string(value)

	def test_iso_datetime(self):
		for value in ("2030-01-15T09:00:00-05:00", "2030-01-15T14:00Z", "2030-01-15 09:00"):
			self.assertEqual(validate_iso_datetime(value), value)

		for value in ("2030-01-15", "09:00", "tomorrow", None):
			with self.assertRaises(frappe.ValidationError, msg=value):
				validate_iso_datetime(value)

	def test_docname(self):
		self.assertEqual(validate_docname("a1b2c3d4e5"), "a1b2c3d4e5")

		for value in ("", "'; drop table", "x" * 141):
			with self.assertRaises(frappe.ValidationError):
				validate_docname(value)

	def test_guest_phone(self):
		self.assertIsNone(validate_guest_phone(None))
		self.assertEqual(validate_guest_phone("+57 300 123 4567"), "+57 300 123 4567")

		with self.assertRaises(frappe.ValidationError):
			validate_guest_phone("call me")


class TestSecurity(unittest.TestCase):
	"""Tests for security helpers."""

	def tearDown(self):
		frappe.set_user("Administrator")

	def test_sanitize_string(self):
		self.assertIsNone(sanitize_string(""))
		self.assertEqual(sanitize_string("  Ana\x00 "), "Ana")
		self.assertEqual(sanitize_string("abcdef", max_length=3), "abc")

	def test_honeypot(self):
		check_honeypot(None)

		with self.assertRaises(frappe.ValidationError):
			check_honeypot("http://spam.example.com")

	def test_session_user(self):
		frappe.set_user("Administrator")
		self.assertEqual(get_session_user(), "Administrator")
		self.assertEqual(require_login(), "Administrator")

		frappe.set_user("Guest")
		self.assertIsNone(get_session_user())
		with self.assertRaises(frappe.AuthenticationError):
			require_login()

	def test_guest_cannot_list_appointments(self):
		frappe.set_user("Guest")

		with self.assertRaises(frappe.AuthenticationError):
			get_my_appointments()


class TestAppointmentAPI(unittest.TestCase):
	"""Tests for API endpoints."""

	def setUp(self):
		frappe.set_user("Administrator")
		# Rate limits are per client IP; every test runs as "local"
		frappe.cache.delete_keys("rate_limit:appointment_booking:")

		self.business = make_business("API Test Business")
		self.service = make_service(self.business.name)

		if not frappe.db.exists("User", OTHER_USER):
			frappe.get_doc({
				"doctype": "User",
				"email": OTHER_USER,
				"first_name": "Booking Tester",
				"send_welcome_email": 0
			}).insert(ignore_permissions=True)

	def tearDown(self):
		frappe.set_user("Administrator")
		frappe.db.rollback()

	def book(self, **kwargs):
		return create_appointment(self.business.name, self.service.name, START, **kwargs)

	def test_get_available_slots(self):
		result = get_available_slots(self.business.name, self.service.name, "2099-01-15")

		self.assertEqual(result["businessId"], self.business.name)
		self.assertEqual(result["date"], "2099-01-15")
		self.assertEqual([slot["time"] for slot in result["slots"]], ["09:00", "09:30", "10:00", "10:30"])
		self.assertTrue(all(slot["isAvailable"] for slot in result["slots"]))

	def test_get_available_slots_invalid_date(self):
		with self.assertRaises(frappe.ValidationError):
			get_available_slots(self.business.name, self.service.name, "15-01-2099")

	def test_appointment_payload(self):
		start = pytz.UTC.localize(datetime(2030, 1, 15, 9, 0))
		end = pytz.UTC.localize(datetime(2030, 1, 15, 9, 30))

		payload = appointment_payload(frappe._dict(
			name="a1b2c3",
			business="b1",
			service="s1",
			status="Pending",
			start_datetime=start,
			end_datetime=end,
			user="Administrator",
		))

		self.assertEqual(payload["start_datetime"], "2030-01-15T09:00:00+00:00")
		self.assertEqual(payload["end_datetime"], "2030-01-15T09:30:00+00:00")
		self.assertIsNone(payload["guest_name"])

	def test_get_available_slots_unexpected_error(self):
		"""Unexpected failures are logged and reported with a generic message."""
		with patch(
			"appointment_booking.api.appointments.endpoints.compute_availability",
			side_effect=RuntimeError("boom")
		), patch("appointment_booking.api.appointments.endpoints.frappe.log_error") as log_error:
			with self.assertRaises(frappe.ValidationError):
				get_available_slots(self.business.name, self.service.name, "2099-01-15")

		log_error.assert_called_once()

	def test_guest_booking(self):
		frappe.set_user("Guest")

		result = self.book(guest_name=" Ana ", guest_phone="3001234567")

		self.assertEqual(result["status"], "Pending")
		self.assertIsNone(result["user"])
		self.assertEqual(result["guest_name"], "Ana")
		self.assertEqual(result["guest_phone"], "3001234567")
		self.assertEqual(result["start_datetime"], "2099-01-15T09:00:00+00:00")

	def test_guest_booking_requires_phone(self):
		frappe.set_user("Guest")

		with self.assertRaises(frappe.ValidationError):
			self.book(guest_name="Ana")

		self.assertFalse(frappe.db.exists("Business Appointment", {"business": self.business.name}))

	def test_guest_booking_invalid_phone(self):
		frappe.set_user("Guest")

		with self.assertRaises(frappe.ValidationError):
			self.book(guest_name="Ana", guest_phone="call me")

	def test_logged_in_booking_ignores_guest_fields(self):
		result = self.book(guest_name="Ana", guest_phone="3001234567")

		self.assertEqual(result["user"], "Administrator")
		self.assertIsNone(result["guest_name"])
		self.assertIsNone(result["guest_phone"])

	def test_same_window_twice(self):
		self.book()

		frappe.set_user("Guest")
		with self.assertRaises(SlotTakenError):
			self.book(guest_name="Ana", guest_phone="3001234567")

	def test_honeypot_blocks_booking(self):
		with self.assertRaises(frappe.ValidationError):
			self.book(honeypot="filled by a bot")

		self.assertFalse(frappe.db.exists("Business Appointment", {"business": self.business.name}))

	def test_owner_updates_status(self):
		appointment = self.book()

		result = update_appointment_status(appointment["name"], "Confirmed")

		self.assertEqual(result["status"], "Confirmed")

	def test_update_status_not_owner(self):
		appointment = self.book()

		frappe.set_user(OTHER_USER)
		with self.assertRaises(NotFoundError):
			update_appointment_status(appointment["name"], "Confirmed")

		frappe.set_user("Administrator")
		self.assertEqual(
			frappe.db.get_value("Business Appointment", appointment["name"], "status"), "Pending"
		)

	def test_cancel_own_appointment(self):
		appointment = self.book()

		result = cancel_appointment(appointment["name"])

		self.assertEqual(result["status"], "Cancelled")

	def test_cancel_as_other_user(self):
		appointment = self.book()

		frappe.set_user(OTHER_USER)
		with self.assertRaises(NotFoundError):
			cancel_appointment(appointment["name"])

	def test_guest_cancel(self):
		frappe.set_user("Guest")
		appointment = self.book(guest_name="Ana", guest_phone="3001234567")

		with self.assertRaises(NotFoundError):
			cancel_appointment(appointment["name"], guest_name="Ana", guest_phone="3009999999")

		result = cancel_appointment(appointment["name"], guest_name="Ana", guest_phone="3001234567")
		self.assertEqual(result["status"], "Cancelled")

	def test_business_appointments(self):
		appointment = self.book()

		result = get_business_appointments(self.business.name, "2099-01-15")
		self.assertEqual([row["name"] for row in result], [appointment["name"]])

		self.assertEqual(get_business_appointments(self.business.name, "2099-01-16"), [])

		frappe.set_user(OTHER_USER)
		with self.assertRaises(NotFoundError):
			get_business_appointments(self.business.name)

	def test_business_dashboard(self):
		self.book()

		result = get_business_dashboard(self.business.name)

		self.assertEqual(result["totalAppointments"], 1)
		self.assertEqual(result["byStatus"]["Pending"], 1)
		self.assertEqual(result["upcomingAppointments"], 1)

		frappe.set_user(OTHER_USER)
		with self.assertRaises(NotFoundError):
			get_business_dashboard(self.business.name)
