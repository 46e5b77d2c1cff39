"""Tracked maintenance intervals per aircraft.

Each interval is due by flight hours (interval_hours), by calendar days
(interval_calendar_days), or both. Feeds the quick schedule preview.
"""

from datetime import date

MAINTENANCE_INTERVALS: list[dict] = [
    # N123AB
    {
        "id": "int-1a",
        "aircraft_id": "n123ab",
        "interval_type": "A_CHECK",
        "description": "A-Check (1A) - Basic airframe and systems inspection",
        "interval_hours": 500,
        "interval_calendar_days": 365,
        "next_due_at": date(2024, 2, 15),
        "next_due_hours": 2500,
        "is_overdue": False,
        "priority": "HIGH",
        "estimated_downtime": 36,
        "estimated_cost": 15000,
    },
    {
        "id": "int-2a",
        "aircraft_id": "n123ab",
        "interval_type": "2A_CHECK",
        "description": "2A Check - Progressive detailed check (1000 hours)",
        "interval_hours": 1000,
        "interval_calendar_days": None,
        "next_due_at": date(2024, 4, 1),
        "next_due_hours": 2500,
        "is_overdue": False,
        "priority": "HIGH",
        "estimated_downtime": 48,
        "estimated_cost": 25000,
    },
    {
        "id": "int-100hr-1",
        "aircraft_id": "n123ab",
        "interval_type": "100_HOUR",
        "description": "100-Hour Inspection - Part 135 regulatory compliance",
        "interval_hours": 100,
        "interval_calendar_days": None,
        "next_due_at": date(2024, 2, 10),
        "next_due_hours": 2500,
        "is_overdue": False,
        "priority": "MEDIUM",
        "estimated_downtime": 8,
        "estimated_cost": 3500,
    },
    {
        "id": "int-4a",
        "aircraft_id": "n123ab",
        "interval_type": "4A_CHECK",
        "description": "4A Check - Progressive detailed check (2000 hours)",
        "interval_hours": 2000,
        "interval_calendar_days": None,
        "next_due_at": date(2024, 6, 1),
        "next_due_hours": 2500,
        "is_overdue": False,
        "priority": "MEDIUM",
        "estimated_downtime": 48,
        "estimated_cost": 45000,
    },
    {
        "id": "int-annual-1",
        "aircraft_id": "n123ab",
        "interval_type": "ANNUAL",
        "description": "Annual Inspection - FAA-mandated comprehensive check",
        "interval_hours": None,
        "interval_calendar_days": 365,
        "next_due_at": date(2024, 3, 1),
        "next_due_hours": 0,
        "is_overdue": False,
        "priority": "HIGH",
        "estimated_downtime": 36,
        "estimated_cost": 18000,
    },
    # N456CD, 25 hours past its 100-hour inspection
    {
        "id": "int-100hr-2",
        "aircraft_id": "n456cd",
        "interval_type": "100_HOUR",
        "description": "100-Hour Inspection - OVERDUE (Part 135 Critical)",
        "interval_hours": 100,
        "interval_calendar_days": None,
        "next_due_at": date(2024, 1, 20),
        "next_due_hours": 2100,
        "is_overdue": True,
        "priority": "CRITICAL",
        "estimated_downtime": 8,
        "estimated_cost": 4000,
    },
    {
        "id": "int-3a",
        "aircraft_id": "n456cd",
        "interval_type": "3A_CHECK",
        "description": "3A Check - Progressive detailed check (1500 hours)",
        "interval_hours": 1500,
        "interval_calendar_days": None,
        "next_due_at": date(2024, 3, 15),
        "next_due_hours": 3100,
        "is_overdue": False,
        "priority": "MEDIUM",
        "estimated_downtime": 48,
        "estimated_cost": 35000,
    },
    {
        "id": "int-1c",
        "aircraft_id": "n456cd",
        "interval_type": "C_CHECK",
        "description": "C-Check (1C) - Comprehensive inspection of airframe and systems",
        "interval_hours": None,
        "interval_calendar_days": 365,
        "next_due_at": date(2024, 2, 1),
        "next_due_hours": 0,
        "is_overdue": False,
        "priority": "HIGH",
        "estimated_downtime": 144,
        "estimated_cost": 85000,
    },
    {
        "id": "int-10a",
        "aircraft_id": "n456cd",
        "interval_type": "10A_CHECK",
        "description": "10A Check - Major systems and airframe checks (5000 hours)",
        "interval_hours": 5000,
        "interval_calendar_days": None,
        "next_due_at": date(2025, 1, 1),
        "next_due_hours": 5000,
        "is_overdue": False,
        "priority": "LOW",
        "estimated_downtime": 72,
        "estimated_cost": 125000,
    },
    # N789XY
    {
        "id": "int-1a-3",
        "aircraft_id": "n789xy",
        "interval_type": "A_CHECK",
        "description": "A-Check (1A) - Basic airframe and systems inspection",
        "interval_hours": 500,
        "interval_calendar_days": 365,
        "next_due_at": date(2024, 3, 1),
        "next_due_hours": 2000,
        "is_overdue": False,
        "priority": "LOW",
        "estimated_downtime": 36,
        "estimated_cost": 15000,
    },
    {
        "id": "int-100hr-3",
        "aircraft_id": "n789xy",
        "interval_type": "100_HOUR",
        "description": "100-Hour Inspection - Part 135 regulatory compliance",
        "interval_hours": 100,
        "interval_calendar_days": None,
        "next_due_at": date(2024, 2, 20),
        "next_due_hours": 1900,
        "is_overdue": False,
        "priority": "MEDIUM",
        "estimated_downtime": 8,
        "estimated_cost": 3500,
    },
    {
        "id": "int-progressive-1",
        "aircraft_id": "n789xy",
        "interval_type": "PROGRESSIVE",
        "description": "Progressive Inspection - Rolling schedule maintenance",
        "interval_hours": None,
        "interval_calendar_days": 90,
        "next_due_at": date(2024, 4, 1),
        "next_due_hours": 0,
        "is_overdue": False,
        "priority": "LOW",
        "estimated_downtime": 36,
        "estimated_cost": 12000,
    },
    {
        "id": "int-2c",
        "aircraft_id": "n789xy",
        "interval_type": "2C_CHECK",
        "description": "2C Check - Deep structural and systems check (24 months)",
        "interval_hours": None,
        "interval_calendar_days": 730,
        "next_due_at": date(2024, 1, 1),
        "next_due_hours": 0,
        "is_overdue": False,
        "priority": "MEDIUM",
        "estimated_downtime": 264,
        "estimated_cost": 185000,
    },
]


def interval_basis(interval: dict) -> str:
    """Human-readable due basis, hours first."""
    if interval["interval_hours"]:
        return f"{interval['interval_hours']}-hour interval"
    return f"{interval['interval_calendar_days']}-day calendar interval"
