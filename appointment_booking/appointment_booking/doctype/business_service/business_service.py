# Copyright (c) 2026, Sebastian Ortiz Valencia and contributors
# For license information, please see license.txt

import frappe
from frappe import _
from frappe.model.document import Document
from frappe.utils import cint, flt


class BusinessService(Document):
	def validate(self) -> None:
		if cint(self.duration) <= 0:
			frappe.throw(_("Duration must be a positive number of minutes"))

		if flt(self.price) <= 0:
			frappe.throw(_("Price must be a positive number"))
