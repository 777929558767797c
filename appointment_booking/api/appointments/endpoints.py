"""
Appointment API Endpoints

Whitelisted functions for frontend/external use. Handlers validate and
shape the request, resolve the caller, and delegate to the scheduling
engine (appointment_booking.appointment_booking.scheduling).

Public endpoints allow guest access with security protections:
- Rate limiting by IP address
- Honeypot validation for bot detection
- Input sanitization
"""

import frappe
from frappe import _
from typing import Any, Dict, List, Optional

from appointment_booking.appointment_booking.scheduling.lifecycle import (
    cancel_appointment as cancel_booking,
    create_appointment as create_booking,
    get_business_dashboard as business_dashboard,
    list_business_appointments,
    list_subject_appointments,
    update_appointment_status as update_booking_status,
)
from appointment_booking.appointment_booking.scheduling.slots import compute_availability
from appointment_booking.appointment_booking.scheduling.subject import RegisteredUser, resolve_subject
from appointment_booking.api.shared import (
    check_honeypot,
    check_rate_limit,
    get_session_user,
    require_login,
    sanitize_string,
    validate_date_string,
    validate_docname,
    validate_guest_phone,
    validate_iso_datetime,
)


def appointment_payload(appointment: Dict[str, Any]) -> Dict[str, Any]:
	"""Serializa un appointment del engine (datetimes ISO-8601 UTC)."""
	return {
		"name": appointment["name"],
		"business": appointment["business"],
		"service": appointment["service"],
		"status": appointment["status"],
		"start_datetime": appointment["start_datetime"].isoformat(),
		"end_datetime": appointment["end_datetime"].isoformat(),
		"user": appointment.get("user"),
		"guest_name": appointment.get("guest_name"),
		"guest_phone": appointment.get("guest_phone"),
	}


@frappe.whitelist(allow_guest=True, methods=["GET"])
def get_available_slots(business: str, service: str, date: str) -> Dict[str, Any]:
	"""
	Obtiene la grilla de slots de un día para un Business y Service.

	Rate limited per IP.

	Args:
		business: nombre del Business
		service: nombre del Business Service
		date: fecha (YYYY-MM-DD) en el timezone del Business

	Returns:
		dict: {
			"businessId": "...",
			"serviceId": "...",
			"date": "2026-01-20",
			"slots": [
				{"time": "09:00", "startTime": "...", "endTime": "...", "isAvailable": True},
				...
			]
		}

	Example:
		```javascript
		frappe.call({
			method: "appointment_booking.api.appointments.get_available_slots",
			args: {business: "a1b2c3d4e5", service: "f6g7h8i9j0", date: "2026-01-20"},
			callback: function(r) {
				console.log(r.message.slots);
			}
		});
		```
	"""
	check_rate_limit("get_available_slots")

	business = validate_docname(business, "business")
	service = validate_docname(service, "service")
	date = validate_date_string(date, "date")

	try:
		return compute_availability(business, service, date)

	except frappe.ValidationError:
		raise
	except Exception as e:
		frappe.log_error(f"Error in get_available_slots: {str(e)}", "API Error")
		frappe.throw(_("Error getting available slots"))


@frappe.whitelist(allow_guest=True, methods=["POST"])
def create_appointment(
	business: str,
	service: str,
	start_time: str,
	guest_name: Optional[str] = None,
	guest_phone: Optional[str] = None,
	honeypot: Optional[str] = None
) -> Dict[str, Any]:
	"""
	Reserva un slot para el usuario autenticado o para un invitado.

	Rate limited per IP (write operation). Protected by honeypot field.

	Args:
		business: nombre del Business
		service: nombre del Business Service
		start_time: inicio ISO-8601 (sin offset = timezone del Business)
		guest_name: nombre del invitado (requerido sin sesión)
		guest_phone: teléfono del invitado (requerido sin sesión)
		honeypot: campo honeypot para detección de bots (debe estar vacío)

	Returns:
		dict: Appointment creado en estado Pending
	"""
	check_honeypot(honeypot)
	check_rate_limit("create_appointment")

	business = validate_docname(business, "business")
	service = validate_docname(service, "service")
	start_time = validate_iso_datetime(start_time, "start_time")
	guest_name = sanitize_string(guest_name, 140)
	guest_phone = validate_guest_phone(guest_phone)

	try:
		subject = resolve_subject(get_session_user(), guest_name, guest_phone)
		appointment = create_booking(business, service, start_time, subject)
		return appointment_payload(appointment)

	except frappe.ValidationError:
		raise
	except Exception as e:
		frappe.log_error(f"Error in create_appointment: {str(e)}", "API Error")
		frappe.throw(_("Error creating appointment"))


@frappe.whitelist(allow_guest=True, methods=["POST"])
def cancel_appointment(
	appointment: str,
	guest_name: Optional[str] = None,
	guest_phone: Optional[str] = None,
	honeypot: Optional[str] = None
) -> Dict[str, Any]:
	"""
	Cancela un appointment de quien lo reservó.

	Con sesión se cancela como el usuario autenticado; sin sesión se
	identifica al invitado por guest_name y guest_phone, los mismos datos
	con los que reservó.

	Falla con PolicyViolationError si faltan menos de 2 horas para el inicio.
	"""
	check_honeypot(honeypot)
	check_rate_limit("cancel_appointment")

	appointment = validate_docname(appointment, "appointment")
	guest_name = sanitize_string(guest_name, 140)
	guest_phone = validate_guest_phone(guest_phone)

	try:
		subject = resolve_subject(get_session_user(), guest_name, guest_phone)
		return appointment_payload(cancel_booking(appointment, subject))

	except frappe.ValidationError:
		raise
	except Exception as e:
		frappe.log_error(f"Error in cancel_appointment: {str(e)}", "API Error")
		frappe.throw(_("Error cancelling appointment"))


@frappe.whitelist(methods=["POST"])
def update_appointment_status(appointment: str, status: str) -> Dict[str, Any]:
	"""
	Cambia el status de un appointment. Sólo el dueño del Business.

	Args:
		appointment: nombre del Business Appointment
		status: Pending, Confirmed, Cancelled o Completed
	"""
	check_rate_limit("update_appointment_status")

	owner = require_login()
	appointment = validate_docname(appointment, "appointment")
	status = sanitize_string(status, 20)

	try:
		return appointment_payload(update_booking_status(appointment, owner, status))

	except frappe.ValidationError:
		raise
	except Exception as e:
		frappe.log_error(f"Error in update_appointment_status: {str(e)}", "API Error")
		frappe.throw(_("Error updating appointment status"))


@frappe.whitelist(methods=["GET"])
def get_my_appointments(status: Optional[str] = None) -> List[Dict[str, Any]]:
	"""Appointments del usuario autenticado, opcionalmente filtrados por status."""
	check_rate_limit("get_my_appointments")

	user = require_login()
	status = sanitize_string(status, 20)

	try:
		appointments = list_subject_appointments(RegisteredUser(user), status=status)
		return [appointment_payload(appt) for appt in appointments]

	except frappe.ValidationError:
		raise
	except Exception as e:
		frappe.log_error(f"Error in get_my_appointments: {str(e)}", "API Error")
		frappe.throw(_("Error getting appointments"))


@frappe.whitelist(methods=["GET"])
def get_business_appointments(business: str, date: Optional[str] = None) -> List[Dict[str, Any]]:
	"""Appointments de un Business del usuario autenticado (opcionalmente de un día)."""
	check_rate_limit("get_business_appointments")

	owner = require_login()
	business = validate_docname(business, "business")
	if date:
		date = validate_date_string(date, "date")

	try:
		appointments = list_business_appointments(business, owner, target_date=date)
		return [appointment_payload(appt) for appt in appointments]

	except frappe.ValidationError:
		raise
	except Exception as e:
		frappe.log_error(f"Error in get_business_appointments: {str(e)}", "API Error")
		frappe.throw(_("Error getting business appointments"))


@frappe.whitelist(methods=["GET"])
def get_business_dashboard(business: str) -> Dict[str, Any]:
	"""
	Estadísticas de appointments de un Business del usuario autenticado.

	Returns:
		dict: {
			"businessId": "...",
			"totalAppointments": 12,
			"byStatus": {"Pending": 3, "Confirmed": 4, "Cancelled": 1, "Completed": 4},
			"upcomingAppointments": 5,
			"completedRevenue": 400.0
		}
	"""
	check_rate_limit("get_business_dashboard")

	owner = require_login()
	business = validate_docname(business, "business")

	try:
		return business_dashboard(business, owner)

	except frappe.ValidationError:
		raise
	except Exception as e:
		frappe.log_error(f"Error in get_business_dashboard: {str(e)}", "API Error")
		frappe.throw(_("Error getting business dashboard"))
