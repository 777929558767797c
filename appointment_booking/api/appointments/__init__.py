"""
Appointments API Domain

Handles availability lookup, booking, cancellation and the owner's
appointment management.
"""

from appointment_booking.api.appointments.endpoints import (
    # Availability
    get_available_slots,
    # Booking
    create_appointment,
    cancel_appointment,
    # Owner
    update_appointment_status,
    get_business_appointments,
    get_business_dashboard,
    # User's appointments (authenticated)
    get_my_appointments,
)

__all__ = [
    "get_available_slots",
    "create_appointment",
    "cancel_appointment",
    "update_appointment_status",
    "get_business_appointments",
    "get_business_dashboard",
    "get_my_appointments",
]
