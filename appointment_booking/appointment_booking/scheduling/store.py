"""
Booking Store

Persistence collaborator for the scheduling engine. The engine only talks to
the store through the methods below; FrappeStore backs them with the
Business, Business Service and Business Appointment DocTypes.

Datetimes cross this boundary as aware UTC datetimes. They are stored as
naive UTC in the database.
"""

import frappe
from frappe.utils import get_datetime
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional
import pytz

BUSINESS = "Business"
SERVICE = "Business Service"
APPOINTMENT = "Business Appointment"

BUSINESS_FIELDS = ["name", "business_name", "business_owner", "category", "working_hours", "timezone"]
SERVICE_FIELDS = ["name", "business", "service_name", "duration", "price"]
APPOINTMENT_FIELDS = [
	"name",
	"business",
	"service",
	"start_datetime",
	"end_datetime",
	"status",
	"user",
	"guest_name",
	"guest_phone",
]


def to_db(value: datetime) -> datetime:
	"""Aware -> naive UTC para columnas Datetime."""
	if value.tzinfo is not None:
		value = value.astimezone(pytz.UTC).replace(tzinfo=None)
	return value


def from_db(value: Any) -> Optional[datetime]:
	"""Naive UTC de la base de datos -> aware UTC."""
	if not value:
		return None
	value = get_datetime(value)
	if value.tzinfo is None:
		return pytz.UTC.localize(value)
	return value.astimezone(pytz.UTC)


class FrappeStore:
	"""Store respaldado por la base de datos del site."""

	def get_business(self, name: str) -> Optional[Dict[str, Any]]:
		if not name:
			return None
		return frappe.db.get_value(BUSINESS, name, BUSINESS_FIELDS, as_dict=True)

	def get_service(self, name: str) -> Optional[Dict[str, Any]]:
		if not name:
			return None
		return frappe.db.get_value(SERVICE, name, SERVICE_FIELDS, as_dict=True)

	def lock_business(self, name: str) -> None:
		"""
		SELECT ... FOR UPDATE sobre la fila del Business.

		Serializa las creaciones concurrentes de un mismo Business hasta el
		commit de la transacción del request.
		"""
		frappe.db.get_value(BUSINESS, name, "name", for_update=True)

	def find_appointments(
		self,
		business: str,
		statuses: Iterable[str],
		start: Optional[datetime] = None,
		end: Optional[datetime] = None
	) -> List[Dict[str, Any]]:
		"""
		Appointments del Business con status en `statuses` que se solapan con
		[start, end). Condición: start_datetime < end AND end_datetime > start.
		"""
		filters = [
			["business", "=", business],
			["status", "in", [str(getattr(s, "value", s)) for s in statuses]],
		]
		if end is not None:
			filters.append(["start_datetime", "<", to_db(end)])
		if start is not None:
			filters.append(["end_datetime", ">", to_db(start)])

		rows = frappe.get_all(
			APPOINTMENT,
			filters=filters,
			fields=APPOINTMENT_FIELDS,
			order_by="start_datetime asc"
		)
		return [self._hydrate(row) for row in rows]

	def insert_appointment(self, values: Dict[str, Any]) -> Dict[str, Any]:
		doc = frappe.get_doc({
			"doctype": APPOINTMENT,
			**values,
			"start_datetime": to_db(values["start_datetime"]),
			"end_datetime": to_db(values["end_datetime"]),
		})
		doc.insert(ignore_permissions=True)
		return self._hydrate(doc)

	def get_appointment(
		self,
		name: str,
		filters: Optional[Dict[str, Any]] = None,
		for_update: bool = False
	) -> Optional[Dict[str, Any]]:
		if not name:
			return None
		row = frappe.db.get_value(
			APPOINTMENT,
			{"name": name, **(filters or {})},
			APPOINTMENT_FIELDS,
			as_dict=True,
			for_update=for_update
		)
		return self._hydrate(row) if row else None

	def set_status(self, name: str, status: str) -> Dict[str, Any]:
		doc = frappe.get_doc(APPOINTMENT, name)
		doc.status = status
		doc.save(ignore_permissions=True)
		return self._hydrate(doc)

	def list_appointments(
		self,
		filters: Dict[str, Any],
		start: Optional[datetime] = None,
		end: Optional[datetime] = None,
		limit: Optional[int] = 500
	) -> List[Dict[str, Any]]:
		"""Appointments que cumplen `filters`; limit=None trae todos."""
		conditions = []
		for key, value in filters.items():
			if isinstance(value, (list, tuple)):
				conditions.append([key, value[0], value[1]])
			else:
				conditions.append([key, "=", value])
		if start is not None:
			conditions.append(["start_datetime", ">=", to_db(start)])
		if end is not None:
			conditions.append(["start_datetime", "<", to_db(end)])

		rows = frappe.get_all(
			APPOINTMENT,
			filters=conditions,
			fields=APPOINTMENT_FIELDS,
			order_by="start_datetime asc",
			limit=limit
		)
		return [self._hydrate(row) for row in rows]

	def _hydrate(self, row: Any) -> Dict[str, Any]:
		data = frappe._dict({field: row.get(field) for field in APPOINTMENT_FIELDS})
		data.start_datetime = from_db(data.start_datetime)
		data.end_datetime = from_db(data.end_datetime)
		return data


def get_store() -> FrappeStore:
	return FrappeStore()
