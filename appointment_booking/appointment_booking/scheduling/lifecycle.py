"""
Appointment Lifecycle

Creation, subject-driven cancellation and owner-driven status changes.

Flujo:
1. create_appointment: valida horario laboral y overlaps, persiste en Pending
2. update_appointment_status: el dueño del Business mueve la cita a cualquier estado
3. cancel_appointment: el sujeto cancela fuera de la ventana de cancelación
4. list_*/get_business_dashboard: lecturas para el sujeto y el dueño del Business
"""

import frappe
from frappe import _
from frappe.utils import cint, flt, get_datetime, getdate
from datetime import date, datetime, timedelta
from typing import Any, Dict, List, Optional, Union

from appointment_booking.config import get_business_timezone_name, get_cancellation_window_hours
from appointment_booking.exceptions import (
	BookingValidationError,
	InvalidTransitionError,
	NotFoundError,
	OutOfHoursError,
	PolicyViolationError,
	SlotTakenError,
)
from .overlap import check_overlap
from .slots import resolve_business_service
from .status import BLOCKING_STATUSES, AppointmentStatus, can_transition, is_terminal, parse_status
from .store import get_store
from .subject import Guest, RegisteredUser, Subject
from .timeutils import (
	at_minutes,
	format_minutes,
	get_timezone,
	local_date,
	local_minutes,
	to_utc,
	utc_now,
)
from .working_hours import get_business_hours


def _logger():
	return frappe.logger("appointment_booking")


def create_appointment(
	business: str,
	service: str,
	start: Union[datetime, str],
	subject: Subject,
	store: Any = None
) -> Dict[str, Any]:
	"""
	Crea un appointment en estado Pending.

	Args:
		business: nombre del Business
		service: nombre del Business Service
		start: inicio (aware, o naive en el timezone del Business)
		subject: RegisteredUser o Guest
		store: colaborador de persistencia

	Returns:
		dict: appointment persistido (datetimes aware UTC)

	Algoritmo:
		1. Resolver Business y Service (NotFoundError)
		2. end = start + service.duration
		3. Validar que [start, end) cae dentro del horario laboral local (OutOfHoursError)
		4. Bloquear el Business y verificar overlaps (SlotTakenError)
		5. Insertar con status Pending
	"""
	store = store or get_store()
	business_doc, service_doc = resolve_business_service(business, service, store)
	open_minutes, close_minutes = get_business_hours(business_doc)
	tz = get_timezone(get_business_timezone_name(business_doc))

	if not isinstance(subject, (RegisteredUser, Guest)):
		frappe.throw(_("A registered user or guest details are required"), BookingValidationError)

	duration = cint(service_doc.get("duration"))
	if duration <= 0:
		frappe.throw(_("Service duration must be a positive number of minutes"), BookingValidationError)

	if not start:
		frappe.throw(_("Start time is required"), BookingValidationError)

	start_utc = to_utc(get_datetime(start), tz)
	end_utc = start_utc + timedelta(minutes=duration)

	_validate_within_working_hours(start_utc, end_utc, open_minutes, close_minutes, tz)

	# Check-then-act bajo lock del Business hasta el commit
	store.lock_business(business_doc.get("name"))

	overlap_result = check_overlap(business_doc.get("name"), start_utc, end_utc, store=store)
	if overlap_result["has_overlap"]:
		_logger().info(
			f"Slot taken for {business_doc.get('name')} at {start_utc.isoformat()}: "
			f"{', '.join(overlap_result['overlapping_appointments'])}"
		)
		frappe.throw(_("The requested time slot is already booked"), SlotTakenError)

	try:
		appointment = store.insert_appointment({
			"business": business_doc.get("name"),
			"service": service_doc.get("name"),
			"start_datetime": start_utc,
			"end_datetime": end_utc,
			"status": AppointmentStatus.PENDING.value,
			**subject.as_fields()
		})
	except (frappe.DuplicateEntryError, frappe.QueryDeadlockError):
		# Otro request ganó la carrera por la misma ventana
		frappe.throw(_("The requested time slot is already booked"), SlotTakenError)

	_logger().info(
		f"Appointment {appointment['name']} created for {business_doc.get('name')} "
		f"({start_utc.isoformat()} - {end_utc.isoformat()})"
	)

	return appointment


def _validate_within_working_hours(
	start_utc: datetime,
	end_utc: datetime,
	open_minutes: int,
	close_minutes: int,
	tz: Any
) -> None:
	"""La cita debe caber completa en el horario laboral de su propio día local."""
	start_minutes = local_minutes(start_utc, tz)
	end_minutes = local_minutes(end_utc, tz)
	crosses_midnight = local_date(start_utc, tz) != local_date(end_utc, tz)

	if crosses_midnight or start_minutes < open_minutes or end_minutes > close_minutes:
		frappe.throw(
			_("Appointments must be between {0} and {1}").format(
				format_minutes(open_minutes), format_minutes(close_minutes)
			),
			OutOfHoursError
		)


def cancel_appointment(
	appointment: str,
	subject: Subject,
	now: Optional[datetime] = None,
	store: Any = None,
	window_hours: Optional[float] = None
) -> Dict[str, Any]:
	"""
	Cancela un appointment a pedido de su sujeto.

	Reglas:
		- NotFoundError si no existe un appointment con ese nombre y sujeto
		- Ya Cancelled: se retorna sin cambios (idempotente)
		- Completed: InvalidTransitionError
		- PolicyViolationError si 0 < horas hasta el inicio < window_hours
		- Citas pasadas o lejanas se pueden cancelar
	"""
	store = store or get_store()
	row = store.get_appointment(appointment, filters=subject.as_filters(), for_update=True)
	if not row:
		frappe.throw(_("Appointment '{0}' not found").format(appointment), NotFoundError)

	status = parse_status(row["status"])
	if status == AppointmentStatus.CANCELLED:
		return row

	if is_terminal(status):
		frappe.throw(
			_("A {0} appointment cannot be cancelled").format(status.value.lower()),
			InvalidTransitionError
		)

	now = now or utc_now()
	if window_hours is None:
		window_hours = get_cancellation_window_hours()

	hours_until_start = (row["start_datetime"] - now).total_seconds() / 3600
	if 0 < hours_until_start < window_hours:
		frappe.throw(
			_("Appointments cannot be cancelled less than {0} hours before they start").format(
				window_hours
			),
			PolicyViolationError
		)

	updated = store.set_status(row["name"], AppointmentStatus.CANCELLED.value)

	_logger().info(f"Appointment {row['name']} cancelled by subject ({status.value} -> Cancelled)")

	return updated


def update_appointment_status(
	appointment: str,
	owner: str,
	new_status: Union[str, AppointmentStatus],
	store: Any = None
) -> Dict[str, Any]:
	"""
	Cambia el status de un appointment (override del dueño del Business).

	El dueño puede fijar cualquiera de los cuatro estados; sólo se valida
	que el status exista y que el caller sea dueño del Business.
	"""
	store = store or get_store()

	row = store.get_appointment(appointment, for_update=True)
	business_doc = store.get_business(row["business"]) if row else None
	if not row or not business_doc or business_doc.get("business_owner") != owner:
		frappe.throw(_("Appointment '{0}' not found").format(appointment), NotFoundError)

	target = parse_status(new_status)

	current = parse_status(row["status"])
	if current == target:
		return row

	updated = store.set_status(row["name"], target.value)

	if can_transition(current, target):
		_logger().info(f"Appointment {row['name']} status {current.value} -> {target.value}")
	else:
		_logger().info(
			f"Appointment {row['name']} status {current.value} -> {target.value} (owner override)"
		)

	return updated


def list_subject_appointments(
	subject: Subject,
	status: Optional[str] = None,
	store: Any = None
) -> List[Dict[str, Any]]:
	"""Appointments de un sujeto, opcionalmente filtrados por status."""
	store = store or get_store()
	filters = dict(subject.as_filters())
	if status:
		filters["status"] = parse_status(status).value
	return store.list_appointments(filters)


def list_business_appointments(
	business: str,
	owner: str,
	target_date: Optional[Union[date, str]] = None,
	store: Any = None
) -> List[Dict[str, Any]]:
	"""
	Appointments de un Business (sólo para su dueño).

	Si se indica target_date, se limita al día local del Business.
	"""
	store = store or get_store()
	business_doc = _get_owned_business(business, owner, store)

	start = end = None
	if target_date:
		tz = get_timezone(get_business_timezone_name(business_doc))
		day = getdate(target_date)
		start = at_minutes(day, 0, tz)
		end = at_minutes(day + timedelta(days=1), 0, tz)

	return store.list_appointments({"business": business_doc.get("name")}, start=start, end=end)


def get_business_dashboard(
	business: str,
	owner: str,
	now: Optional[datetime] = None,
	store: Any = None
) -> Dict[str, Any]:
	"""
	Estadísticas de appointments de un Business (sólo para su dueño).

	Returns:
		dict: {
			"businessId": "BIZ-0001",
			"totalAppointments": 12,
			"byStatus": {"Pending": 3, "Confirmed": 4, "Cancelled": 1, "Completed": 4},
			"upcomingAppointments": 5,
			"completedRevenue": 400.0
		}

	upcomingAppointments cuenta los Pending/Confirmed que aún no empiezan;
	completedRevenue suma el precio del servicio de cada cita Completed.
	"""
	store = store or get_store()
	business_doc = _get_owned_business(business, owner, store)
	now = now or utc_now()

	by_status = {status.value: 0 for status in AppointmentStatus}
	upcoming = 0
	revenue = 0.0
	prices: Dict[str, float] = {}

	for row in store.list_appointments({"business": business_doc.get("name")}, limit=None):
		status = parse_status(row["status"])
		by_status[status.value] += 1

		if status in BLOCKING_STATUSES and row["start_datetime"] >= now:
			upcoming += 1

		if status == AppointmentStatus.COMPLETED:
			if row["service"] not in prices:
				service_doc = store.get_service(row["service"])
				prices[row["service"]] = flt(service_doc.get("price")) if service_doc else 0.0
			revenue += prices[row["service"]]

	return {
		"businessId": business_doc.get("name"),
		"totalAppointments": sum(by_status.values()),
		"byStatus": by_status,
		"upcomingAppointments": upcoming,
		"completedRevenue": revenue
	}


def _get_owned_business(business: str, owner: str, store: Any) -> Dict[str, Any]:
	"""Business del dueño; otro dueño o inexistente -> NotFoundError."""
	business_doc = store.get_business(business)
	if not business_doc or business_doc.get("business_owner") != owner:
		frappe.throw(_("Business '{0}' not found").format(business), NotFoundError)
	return business_doc
