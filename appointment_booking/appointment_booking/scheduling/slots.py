"""
Slot Generation Service

Generates the full-day grid of candidate slots for a Business and Service,
considering:
- Business working hours
- Service duration (fixed, non-overlapping grid)
- Existing blocking appointments
- Elapsed time (slots starting before "now" are not bookable)
"""

import frappe
from frappe import _
from frappe.utils import cint, getdate
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Tuple, Union

from appointment_booking.config import get_business_timezone_name
from appointment_booking.exceptions import BookingValidationError, NotFoundError
from .overlap import find_blocking_appointments
from .store import get_store
from .timeutils import (
	at_minutes,
	format_minutes,
	get_timezone,
	intervals_overlap,
	to_iso,
	utc_now,
)
from .working_hours import get_business_hours


def resolve_business_service(business: str, service: str, store: Any) -> Tuple[Dict[str, Any], Dict[str, Any]]:
	"""
	Obtiene Business y Business Service.

	Raises:
		NotFoundError: si alguno no existe o el servicio es de otro Business
	"""
	business_doc = store.get_business(business)
	if not business_doc:
		frappe.throw(_("Business '{0}' not found").format(business), NotFoundError)

	service_doc = store.get_service(service)
	if not service_doc or service_doc.get("business") != business_doc.get("name"):
		frappe.throw(_("Service '{0}' not found").format(service), NotFoundError)

	return business_doc, service_doc


def generate_slot_grid(open_minutes: int, close_minutes: int, duration: int) -> List[Tuple[int, int]]:
	"""
	Genera la grilla de slots [start, end) en minutos del día.

	Algoritmo:
		1. cursor = open
		2. Mientras cursor + duration <= close:
			a. emitir [cursor, cursor + duration)
			b. cursor += duration
		3. El resto parcial que se pasaría del cierre se descarta
	"""
	if duration <= 0:
		frappe.throw(_("Service duration must be a positive number of minutes"), BookingValidationError)

	grid = []
	cursor = open_minutes

	while cursor + duration <= close_minutes:
		grid.append((cursor, cursor + duration))
		cursor += duration

	return grid


def compute_availability(
	business: str,
	service: str,
	target_date: Union[date, str],
	now: Optional[datetime] = None,
	store: Any = None
) -> Dict[str, Any]:
	"""
	Calcula la grilla de slots de un día con su disponibilidad.

	Args:
		business: nombre del Business
		service: nombre del Business Service
		target_date: fecha (date o YYYY-MM-DD), en el timezone del Business
		now: instante actual (aware); por defecto utc_now()
		store: colaborador de persistencia

	Returns:
		dict: {
			"businessId": "BIZ-0001",
			"serviceId": "SRV-0001",
			"date": "2026-01-15",
			"slots": [
				{
					"time": "09:00",
					"startTime": "2026-01-15T09:00:00-05:00",
					"endTime": "2026-01-15T09:30:00-05:00",
					"isAvailable": True
				},
				...
			]
		}
	"""
	store = store or get_store()
	business_doc, service_doc = resolve_business_service(business, service, store)
	open_minutes, close_minutes = get_business_hours(business_doc)

	tz = get_timezone(get_business_timezone_name(business_doc))
	target_date = getdate(target_date)
	now = now or utc_now()

	grid = generate_slot_grid(open_minutes, close_minutes, cint(service_doc.get("duration")))

	# Una sola consulta para todo el día; la grilla se evalúa en memoria
	booked = find_blocking_appointments(
		business_doc.get("name"),
		at_minutes(target_date, open_minutes, tz),
		at_minutes(target_date, close_minutes, tz),
		store=store
	)

	slots = []
	for start_minutes, end_minutes in grid:
		slot_start = at_minutes(target_date, start_minutes, tz)
		slot_end = at_minutes(target_date, end_minutes, tz)

		is_taken = any(
			intervals_overlap(slot_start, slot_end, appt["start_datetime"], appt["end_datetime"])
			for appt in booked
		)
		is_past = slot_start < now

		slots.append({
			"time": format_minutes(start_minutes),
			"startTime": to_iso(slot_start, tz),
			"endTime": to_iso(slot_end, tz),
			"isAvailable": not (is_taken or is_past)
		})

	return {
		"businessId": business_doc.get("name"),
		"serviceId": service_doc.get("name"),
		"date": target_date.strftime("%Y-%m-%d"),
		"slots": slots
	}
