"""
Security Utilities for Public APIs

Provides rate limiting, honeypot validation, session helpers and input
sanitization for APIs that allow guest access.
"""

import re
from typing import Optional

import frappe
from frappe import _
from frappe.utils import cint

from appointment_booking.config import get_rate_limit


# ===================
# Rate Limiting
# ===================

def check_rate_limit(action: str, limit: Optional[int] = None, seconds: Optional[int] = None) -> None:
    """
    Check rate limit for an action by IP address.

    Uses Frappe's cache (Redis) to track request counts per IP. Limits default
    to the site configuration (appointment_booking_rate_limits).

    Args:
        action: Identifier for the action being rate limited
        limit: Maximum number of requests allowed
        seconds: Time window in seconds

    Raises:
        frappe.TooManyRequestsError: If rate limit exceeded
    """
    default_limit, default_seconds = get_rate_limit(action)
    limit = limit or default_limit
    seconds = seconds or default_seconds

    ip = get_client_ip()
    cache_key = f"rate_limit:appointment_booking:{action}:{ip}"

    current = cint(frappe.cache.get_value(cache_key) or 0)

    if current >= limit:
        frappe.log_error(
            title=_("Rate Limit Exceeded"),
            message=f"IP: {ip}, Action: {action}, Limit: {limit}/{seconds}s"
        )
        frappe.throw(
            _("Too many requests. Please wait a moment and try again."),
            frappe.TooManyRequestsError
        )

    frappe.cache.set_value(cache_key, current + 1, expires_in_sec=seconds)


def get_client_ip() -> str:
    """
    Get the real client IP address, handling proxies.

    Returns:
        str: Client IP address
    """
    request = getattr(frappe.local, "request", None)
    if not request:
        return "local"

    forwarded_for = request.headers.get("X-Forwarded-For", "")
    if forwarded_for:
        # X-Forwarded-For can contain multiple IPs, take the first one
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP", "")
    if real_ip:
        return real_ip.strip()

    return request.remote_addr or "unknown"


# ===================
# Session
# ===================

def get_session_user() -> Optional[str]:
    """Authenticated user, or None for guest sessions."""
    user = frappe.session.user
    if not user or user == "Guest":
        return None
    return user


def require_login() -> str:
    """
    Returns the authenticated user.

    Raises:
        frappe.AuthenticationError: If the session is a guest session
    """
    user = get_session_user()
    if not user:
        frappe.throw(
            _("Authentication required. Please login first."),
            frappe.AuthenticationError
        )
    return user


# ===================
# Honeypot Validation
# ===================

def check_honeypot(honeypot_value: Optional[str] = None) -> None:
    """
    Check honeypot field to detect bot submissions.

    Bots typically fill all form fields, including hidden ones.

    Raises:
        frappe.ValidationError: If honeypot is filled (bot detected)
    """
    if honeypot_value:
        ip = get_client_ip()
        frappe.log_error(
            title=_("Bot Detected (Honeypot)"),
            message=f"IP: {ip}, Honeypot value: {honeypot_value[:100]}"
        )
        # Generic error to not reveal detection
        frappe.throw(_("Invalid request"), frappe.ValidationError)


# ===================
# Input Sanitization
# ===================

def sanitize_string(value: Optional[str], max_length: int = 500) -> Optional[str]:
    """
    General string sanitization.

    Args:
        value: String to sanitize
        max_length: Maximum allowed length

    Returns:
        str: Sanitized string, or None for empty input
    """
    if not value:
        return None

    value = str(value).strip()

    if len(value) > max_length:
        value = value[:max_length]

    # Remove null bytes and other control characters
    value = re.sub(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]", "", value)

    return value
