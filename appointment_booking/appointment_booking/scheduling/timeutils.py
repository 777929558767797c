"""
Time & Interval Arithmetic

Shared primitives for the scheduling engine:
- HH:mm <-> minutes since local midnight
- Half-open interval overlap
- Timezone normalization (pytz)

Appointment instants are always compared as aware UTC datetimes. Only
working-hours bounds are compared in local minutes of day.
"""

import re
import frappe
from frappe import _
from datetime import datetime, date, time, timedelta
from typing import Union
import pytz

from appointment_booking.exceptions import BookingValidationError, TimeFormatError

MINUTES_PER_DAY = 24 * 60

TIME_OF_DAY_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)$")


def to_minutes_of_day(value: str) -> int:
	"""
	Convierte "HH:mm" a minutos desde medianoche local.

	Args:
		value: hora en formato 24h con dos dígitos ("09:00", "18:30")

	Returns:
		int: minutos en [0, 1440)

	Raises:
		TimeFormatError: si el string no tiene la forma HH:mm
	"""
	match = TIME_OF_DAY_RE.match(str(value or "").strip())
	if not match:
		frappe.throw(_("Invalid time '{0}'. Use HH:mm").format(value), TimeFormatError)

	return int(match.group(1)) * 60 + int(match.group(2))


def format_minutes(minutes: int) -> str:
	"""Inversa de to_minutes_of_day: 570 -> "09:30"."""
	if minutes < 0 or minutes >= MINUTES_PER_DAY:
		frappe.throw(_("Minutes out of range: {0}").format(minutes), TimeFormatError)

	return f"{minutes // 60:02d}:{minutes % 60:02d}"


def intervals_overlap(start_a, end_a, start_b, end_b) -> bool:
	"""
	Condición de overlap para intervalos semiabiertos [start, end).

	Intervalos adyacentes (end_a == start_b) NO se solapan.
	Acepta ints (minutos) o datetimes aware.
	"""
	return start_a < end_b and end_a > start_b


def get_timezone(tz_name: str) -> pytz.BaseTzInfo:
	"""Obtiene el timezone pytz; nombre inválido -> BookingValidationError."""
	try:
		return pytz.timezone(tz_name)
	except pytz.UnknownTimeZoneError:
		frappe.throw(_("Invalid timezone '{0}'").format(tz_name), BookingValidationError)


def utc_now() -> datetime:
	return datetime.now(pytz.UTC)


def to_utc(value: datetime, tz: pytz.BaseTzInfo) -> datetime:
	"""
	Normaliza un datetime a UTC aware.

	Los datetimes naive se interpretan como hora local de `tz`.
	"""
	if value.tzinfo is None:
		value = tz.localize(value)
	return value.astimezone(pytz.UTC)


def local_minutes(value: datetime, tz: pytz.BaseTzInfo) -> Union[int, float]:
	"""Minutos desde la medianoche local de `value` en `tz` (segundos como fracción)."""
	local = value.astimezone(tz)
	minutes = local.hour * 60 + local.minute
	if local.second or local.microsecond:
		return minutes + (local.second + local.microsecond / 1e6) / 60
	return minutes


def local_date(value: datetime, tz: pytz.BaseTzInfo) -> date:
	return value.astimezone(tz).date()


def at_minutes(target_date: date, minutes: int, tz: pytz.BaseTzInfo) -> datetime:
	"""Instante aware para un offset de minutos sobre la medianoche local de target_date."""
	naive = datetime.combine(target_date, time.min) + timedelta(minutes=minutes)
	return tz.localize(naive)


def to_iso(value: datetime, tz: pytz.BaseTzInfo) -> str:
	"""ISO-8601 con offset, expresado en el timezone local."""
	return value.astimezone(tz).isoformat()
