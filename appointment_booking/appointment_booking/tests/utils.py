"""
In-memory booking store for engine tests.

Implements the same interface as scheduling.store.FrappeStore without
touching the database, so scheduling rules can be tested against fixed
data and a fixed clock.
"""

import itertools
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

import frappe
import pytz

from appointment_booking.appointment_booking.scheduling.timeutils import intervals_overlap

OWNER = "owner@example.com"
BOOKER = "booker@example.com"


def utc(year, month, day, hour=0, minute=0):
	return pytz.UTC.localize(datetime(year, month, day, hour, minute))


class MemoryStore:
	def __init__(self):
		self.businesses: Dict[str, Any] = {}
		self.services: Dict[str, Any] = {}
		self.appointments: Dict[str, Any] = {}
		self.locked: List[str] = []
		self._ids = itertools.count(1)

	# ===== FIXTURES =====

	def add_business(self, name="BIZ-1", working_hours="09:00-11:00", timezone="UTC", business_owner=OWNER):
		self.businesses[name] = frappe._dict(
			name=name,
			business_name=name,
			business_owner=business_owner,
			category="Health",
			working_hours=working_hours,
			timezone=timezone,
		)
		return self.businesses[name]

	def add_service(self, name="SRV-1", business="BIZ-1", duration=30, price=100):
		self.services[name] = frappe._dict(
			name=name,
			business=business,
			service_name=name,
			duration=duration,
			price=price,
		)
		return self.services[name]

	def add_appointment(
		self,
		start,
		end,
		status="Confirmed",
		business="BIZ-1",
		service="SRV-1",
		user=BOOKER,
		guest_name=None,
		guest_phone=None
	):
		return self.insert_appointment({
			"business": business,
			"service": service,
			"start_datetime": start,
			"end_datetime": end,
			"status": status,
			"user": user,
			"guest_name": guest_name,
			"guest_phone": guest_phone,
		})

	# ===== STORE INTERFACE =====

	def get_business(self, name):
		row = self.businesses.get(name)
		return frappe._dict(row) if row else None

	def get_service(self, name):
		row = self.services.get(name)
		return frappe._dict(row) if row else None

	def lock_business(self, name):
		self.locked.append(name)

	def find_appointments(
		self,
		business: str,
		statuses: Iterable[Any],
		start: Optional[datetime] = None,
		end: Optional[datetime] = None
	):
		status_values = {getattr(s, "value", s) for s in statuses}
		result = []
		for row in self.appointments.values():
			if row.business != business or row.status not in status_values:
				continue
			if start is not None and end is not None:
				if not intervals_overlap(row.start_datetime, row.end_datetime, start, end):
					continue
			result.append(frappe._dict(row))
		return sorted(result, key=lambda r: r.start_datetime)

	def insert_appointment(self, values):
		name = f"APT-{next(self._ids):04d}"
		row = frappe._dict(
			name=name,
			user=None,
			guest_name=None,
			guest_phone=None,
			**values
		)
		self.appointments[name] = row
		return frappe._dict(row)

	def get_appointment(self, name, filters=None, for_update=False):
		row = self.appointments.get(name)
		if not row or not _matches(row, filters or {}):
			return None
		return frappe._dict(row)

	def set_status(self, name, status):
		self.appointments[name].status = status
		return frappe._dict(self.appointments[name])

	def list_appointments(self, filters, start=None, end=None, limit=500):
		result = [
			frappe._dict(row)
			for row in self.appointments.values()
			if _matches(row, filters)
			and (start is None or row.start_datetime >= start)
			and (end is None or row.start_datetime < end)
		]
		result = sorted(result, key=lambda r: r.start_datetime)
		return result[:limit] if limit else result


def _matches(row, filters):
	for key, expected in filters.items():
		if isinstance(expected, (list, tuple)):
			operator, value = expected
			if operator == "is" and value == "not set" and row.get(key):
				return False
			if operator == "is" and value == "set" and not row.get(key):
				return False
		elif row.get(key) != expected:
			return False
	return True
