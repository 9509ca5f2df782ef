"""
Utility functions module.

Calendar semantics shared across the system:
- Dates are plain calendar days (``datetime.date``), never timestamps
- Weekdays are numbered 0 = Sunday through 6 = Saturday
- Reminder instants are minute-resolution times of day (``HH:MM``)
"""
