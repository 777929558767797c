"""
Booking Request Validators

Shape checks for request parameters before they reach the scheduling engine.
"""

import re
from typing import Optional

import frappe
from frappe import _

DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
ISO_DATETIME_RE = re.compile(
    r"^\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}(:\d{2}(\.\d{1,6})?)?(Z|[+-]\d{2}:?\d{2})?$"
)
DOCNAME_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9 _.@-]*$")
PHONE_RE = re.compile(r"^\+?[0-9 ()-]{7,20}$")


def validate_date_string(date_str: str, field_name: str = "date") -> str:
    """
    Validate date string format (YYYY-MM-DD).

    Raises:
        frappe.ValidationError: If date format is invalid
    """
    if not date_str:
        frappe.throw(_("{0} is required").format(field_name), frappe.ValidationError)

    date_str = str(date_str).strip()

    if not DATE_RE.match(date_str):
        frappe.throw(
            _("Invalid {0} format. Use YYYY-MM-DD").format(field_name), frappe.ValidationError
        )

    return date_str


def validate_iso_datetime(datetime_str: str, field_name: str = "datetime") -> str:
    """
    Validate an ISO-8601 datetime ("2026-01-20T10:00:00-05:00", "2026-01-20T15:00Z").

    A value without offset is read in the business timezone by the engine.

    Raises:
        frappe.ValidationError: If datetime format is invalid
    """
    if not datetime_str:
        frappe.throw(_("{0} is required").format(field_name), frappe.ValidationError)

    datetime_str = str(datetime_str).strip()

    if not ISO_DATETIME_RE.match(datetime_str):
        frappe.throw(
            _("Invalid {0} format. Use ISO-8601, e.g. 2026-01-20T10:00:00-05:00").format(field_name),
            frappe.ValidationError,
        )

    return datetime_str


def validate_docname(name: str, field_name: str = "name") -> str:
    """
    Validate a document name (ID).

    Raises:
        frappe.ValidationError: If name is missing, too long or has unexpected characters
    """
    if not name:
        frappe.throw(_("{0} is required").format(field_name), frappe.ValidationError)

    name = str(name).strip()

    if len(name) > 140:
        frappe.throw(_("{0} is too long").format(field_name), frappe.ValidationError)

    if not DOCNAME_RE.match(name):
        frappe.throw(_("Invalid {0}").format(field_name), frappe.ValidationError)

    return name


def validate_guest_phone(phone: Optional[str], field_name: str = "guest_phone") -> Optional[str]:
    """Optional phone number; digits, spaces, dashes, parentheses and a leading +."""
    if not phone:
        return None

    phone = str(phone).strip()

    if not PHONE_RE.match(phone):
        frappe.throw(_("Invalid {0}").format(field_name), frappe.ValidationError)

    return phone
