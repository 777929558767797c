"""
Shared utilities for Appointment Booking API.

Re-exports request hardening helpers (rate limiting, honeypot, session,
sanitization) and booking-specific validators.
"""

from appointment_booking.api.security import (
    check_honeypot,
    check_rate_limit,
    get_client_ip,
    get_session_user,
    require_login,
    sanitize_string,
)

from .validators import (
    validate_date_string,
    validate_docname,
    validate_guest_phone,
    validate_iso_datetime,
)

__all__ = [
    # Security
    "check_honeypot",
    "check_rate_limit",
    "get_client_ip",
    "get_session_user",
    "require_login",
    "sanitize_string",
    # Validators
    "validate_date_string",
    "validate_docname",
    "validate_guest_phone",
    "validate_iso_datetime",
]
