"""Seasonal and schedule-demand context for maintenance timing."""

from datetime import date

SEASONAL_WEATHER_FACTORS: dict[str, list[str]] = {
    "SPRING": ["Variable weather patterns", "Increased turbulence", "Pollen and dust exposure"],
    "SUMMER": ["High temperature operations", "Thunderstorm activity", "Increased UV exposure"],
    "FALL": ["Temperature fluctuations", "Increased precipitation", "Seasonal wind patterns"],
    "WINTER": ["Cold weather operations", "Ice and snow conditions", "Reduced daylight hours"],
}


def current_season(day: date) -> str:
    month = day.month
    if 3 <= month <= 5:
        return "SPRING"
    if 6 <= month <= 8:
        return "SUMMER"
    if 9 <= month <= 11:
        return "FALL"
    return "WINTER"


def is_peak_season(day: date) -> bool:
    """Summer (Jun-Aug) and the winter holidays (Dec-Jan)."""
    return 6 <= day.month <= 8 or day.month in (12, 1)


def weather_factors(season: str) -> list[str]:
    return list(SEASONAL_WEATHER_FACTORS.get(season, []))


def maintenance_window_opportunity(day: date) -> str:
    """EXCELLENT | GOOD | LIMITED | POOR."""
    if not is_peak_season(day):
        # Feb, Mar, Oct, Nov are off-peak with good weather
        return "EXCELLENT" if day.month in (2, 3, 10, 11) else "GOOD"
    if day.month in (7, 8):
        return "LIMITED"
    return "POOR"


def seasonal_context(day: date) -> dict:
    season = current_season(day)
    return {
        "current_season": season,
        "peak_season": is_peak_season(day),
        "seasonal_demand_pattern": "BUSINESS_TRAVEL",
        "weather_factors": weather_factors(season),
        "maintenance_window_opportunity": maintenance_window_opportunity(day),
    }


def default_schedule_demand(utilization: dict, peak: bool) -> dict:
    """Demand context used when the caller supplies none."""
    return {
        "current_period_demand": "HIGH" if peak else "MEDIUM",
        "upcoming_bookings": 15,
        "average_weekly_utilization": utilization.get("utilization_percentage", 0),
        "demand_trend": utilization.get("trend", "STABLE"),
        "operational_pressure": "HIGH" if peak else "MEDIUM",
    }
