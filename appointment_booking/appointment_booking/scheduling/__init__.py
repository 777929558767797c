"""
Scheduling Services Module

This module provides core business logic for appointment scheduling:
- Time and interval arithmetic (timeutils.py)
- Working hours parsing (working_hours.py)
- Overlap detection (overlap.py)
- Slot grid generation (slots.py)
- Appointment lifecycle (lifecycle.py, status.py, subject.py)
- Persistence collaborator (store.py)
"""
