"""Fleet utilization analysis from the static registry."""

import logging
from datetime import datetime, timedelta, timezone

from gander.data.fleet import FLEET

logger = logging.getLogger(__name__)

HIGH_UTILIZATION = 80
LOW_UTILIZATION = 60


def maintenance_windows(utilization: float, now: datetime) -> list[dict]:
    """Next maintenance opportunity; lower utilization opens longer windows sooner."""
    if utilization < 50:
        start_days, duration, suitability, types = 7, 7, "EXCELLENT", ["A_CHECK", "100_HOUR", "C_CHECK"]
    elif utilization < 70:
        start_days, duration, suitability, types = 14, 4, "GOOD", ["A_CHECK", "100_HOUR"]
    else:
        start_days, duration, suitability, types = 21, 2, "FAIR", ["100_HOUR"]
    start = now + timedelta(days=start_days)
    return [
        {
            "start": start.isoformat(),
            "end": (start + timedelta(days=duration)).isoformat(),
            "duration": duration,
            "suitability": suitability,
            "maintenanceTypes": types,
        }
    ]


def aircraft_utilization(aircraft: dict, now: datetime) -> dict:
    util = aircraft["utilization"]
    pct = util["utilization_percentage"]
    return {
        "aircraftId": aircraft["id"],
        "tailNumber": aircraft["tail_number"],
        "aircraftType": f"{aircraft['make']} {aircraft['model']}",
        "currentFlightHours": util["flight_hours"],
        "totalFlightHours": aircraft["total_aircraft_time"],
        "totalCycles": aircraft["total_cycles"],
        "averageUtilization": pct,
        "utilizationTrend": util["trend"],
        "flightFrequency": round(pct / 4),
        "recentFlights": util["recent_flights"],
        "averageFlightDuration": util["avg_flight_time"],
        "lastInspection": {
            "type": aircraft["last_inspection"]["type"],
            "date": aircraft["last_inspection"]["date"].isoformat(),
        },
        "maintenanceWindows": maintenance_windows(pct, now),
        "maintenanceImpact": {"risk": util["maintenance_risk"]},
    }


def utilization_analysis(tail_number: str | None = None, now: datetime | None = None) -> dict:
    """Per-aircraft utilization plus a fleet summary, optionally for one tail."""
    now = now or datetime.now(timezone.utc)
    aircraft = list(FLEET.values())
    if tail_number:
        aircraft = [a for a in aircraft if a["tail_number"] == tail_number.upper()]

    data = [aircraft_utilization(a, now) for a in aircraft]
    count = len(data)
    summary = {
        "totalAircraft": count,
        "averageFleetUtilization": (
            round(sum(d["averageUtilization"] for d in data) / count) if count else 0
        ),
        "totalFlightHours": round(sum(d["currentFlightHours"] for d in data), 1),
        "highUtilizationAircraft": sum(1 for d in data if d["averageUtilization"] > HIGH_UTILIZATION),
        "lowUtilizationAircraft": sum(1 for d in data if d["averageUtilization"] < LOW_UTILIZATION),
        "maintenanceAlertsCount": sum(1 for d in data if d["maintenanceImpact"]["risk"] == "HIGH"),
    }
    logger.debug(f"Utilization analysis for {count} aircraft")
    return {"data": data, "summary": summary}
