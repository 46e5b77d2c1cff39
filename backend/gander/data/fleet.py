"""Static fleet registry with utilization summaries.

Used for:
- generator input (aircraft data + utilization)
- approval emails (make/model/total time)
- baseline recommendations when nothing has been generated yet
"""

from datetime import date

FLEET: dict[str, dict] = {
    "n123ab": {
        "id": "n123ab",
        "tail_number": "N123AB",
        "make": "Gulfstream",
        "model": "G550",
        "serial_number": "G550-001",
        "year_of_manufacture": 2018,
        "total_aircraft_time": 2450,  # hours
        "total_cycles": 1850,
        "last_inspection": {"type": "A_CHECK", "date": date(2024, 1, 15)},
        "utilization": {
            "utilization_percentage": 82,
            "flight_hours": 164.5,
            "avg_flight_time": 2.9,
            "maintenance_risk": "HIGH",
            "trend": "INCREASING",
            "recent_flights": 57,
        },
    },
    "n456cd": {
        "id": "n456cd",
        "tail_number": "N456CD",
        "make": "Gulfstream",
        "model": "G550",
        "serial_number": "G550-002",
        "year_of_manufacture": 2019,
        "total_aircraft_time": 2125,  # approaching 100-hour inspection
        "total_cycles": 1620,
        "last_inspection": {"type": "100_HOUR", "date": date(2024, 1, 10)},
        "utilization": {
            "utilization_percentage": 55,
            "flight_hours": 110.0,
            "avg_flight_time": 2.4,
            "maintenance_risk": "MEDIUM",
            "trend": "STABLE",
            "recent_flights": 18,
        },
    },
    "n789xy": {
        "id": "n789xy",
        "tail_number": "N789XY",
        "make": "Gulfstream",
        "model": "G550",
        "serial_number": "G550-003",
        "year_of_manufacture": 2020,
        "total_aircraft_time": 1875,
        "total_cycles": 1425,
        "last_inspection": {"type": "A_CHECK", "date": date(2024, 1, 20)},
        "utilization": {
            "utilization_percentage": 31,
            "flight_hours": 62.0,
            "avg_flight_time": 1.8,
            "maintenance_risk": "LOW",
            "trend": "DECREASING",
            "recent_flights": 8,
        },
    },
}


def get_aircraft(aircraft_id: str) -> dict | None:
    return FLEET.get(aircraft_id)


def get_aircraft_by_tail(tail_number: str) -> dict | None:
    tail = tail_number.upper()
    return next((a for a in FLEET.values() if a["tail_number"] == tail), None)


def aircraft_id_for_tail(tail_number: str) -> str:
    """Registry id for a tail number, derived when the tail is unknown."""
    aircraft = get_aircraft_by_tail(tail_number)
    if aircraft:
        return aircraft["id"]
    return "".join(ch for ch in tail_number.lower() if ch.isalnum()) or "unknown"
