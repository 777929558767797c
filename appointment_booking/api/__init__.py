"""
Appointment Booking API

Structure:
    api/
    ├── __init__.py              # This file
    ├── appointments/            # Appointments domain
    │   ├── __init__.py          # Re-exports endpoints
    │   └── endpoints.py         # Whitelisted endpoints
    ├── shared/                  # Shared utilities
    │   ├── __init__.py          # Re-exports security helpers and validators
    │   └── validators.py        # Request parameter validators
    └── security.py              # Rate limiting, honeypot, session helpers

Usage:
    frappe.call("appointment_booking.api.appointments.get_available_slots", ...)
"""

from . import appointments
from . import shared

__all__ = [
    "appointments",
    "shared",
]
