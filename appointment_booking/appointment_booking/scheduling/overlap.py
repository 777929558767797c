"""
Overlap Detection Service

Detects scheduling conflicts (overlaps) between appointments of a Business,
considering:
- Appointment status (Pending, Confirmed block; Cancelled, Completed don't)
- Whole-business scope: all services share one timeline
"""

from datetime import datetime
from typing import Any, Dict, List

from .status import BLOCKING_STATUSES
from .store import get_store


def find_blocking_appointments(
	business: str,
	start_datetime: datetime,
	end_datetime: datetime,
	store: Any = None
) -> List[Dict[str, Any]]:
	"""
	Appointments Pending/Confirmed del Business que se solapan con
	[start_datetime, end_datetime).
	"""
	store = store or get_store()
	return store.find_appointments(
		business,
		BLOCKING_STATUSES,
		start=start_datetime,
		end=end_datetime
	)


def check_overlap(
	business: str,
	start_datetime: datetime,
	end_datetime: datetime,
	store: Any = None
) -> Dict[str, Any]:
	"""
	Detecta overlaps con appointments existentes.

	Args:
		business: nombre del Business
		start_datetime: inicio del rango a validar (aware)
		end_datetime: fin del rango a validar (aware)
		store: colaborador de persistencia (FrappeStore por defecto)

	Returns:
		dict: {
			"has_overlap": bool,
			"overlapping_appointments": [list of appointment names]
		}

	Algoritmo:
		1. Consultar appointments con:
			- business = X
			- status in ("Pending", "Confirmed")
			- (start < end_datetime AND end > start_datetime)
		2. Retornar resultado
	"""
	appointments = find_blocking_appointments(
		business,
		start_datetime,
		end_datetime,
		store=store
	)

	overlapping = [appt["name"] for appt in appointments]

	return {
		"has_overlap": bool(overlapping),
		"overlapping_appointments": overlapping
	}
