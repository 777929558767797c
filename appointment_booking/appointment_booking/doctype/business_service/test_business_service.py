# Copyright (c) 2026, Sebastian Ortiz Valencia and Contributors
# See license.txt

import frappe
from frappe.tests.utils import FrappeTestCase

from appointment_booking.appointment_booking.doctype.business.test_business import make_business


def make_service(business, service_name="Consulta", duration=30, price=100):
	return frappe.get_doc({
		"doctype": "Business Service",
		"business": business,
		"service_name": service_name,
		"duration": duration,
		"price": price,
	}).insert(ignore_permissions=True)


class TestBusinessService(FrappeTestCase):
	def setUp(self):
		self.business = make_business("Service Test Business")

	def tearDown(self):
		frappe.db.rollback()

	def test_valid_service(self):
		service = make_service(self.business.name)

		self.assertEqual(service.duration, 30)

	def test_duration_must_be_positive(self):
		with self.assertRaises(frappe.ValidationError):
			make_service(self.business.name, duration=0)

	def test_price_must_be_positive(self):
		with self.assertRaises(frappe.ValidationError):
			make_service(self.business.name, price=0)
