"""Recommendation generator: one LLM call over the fleet, demo fallback.

Takes per-aircraft inputs (aircraft data + utilization summary, optional
schedule-demand and seasonal context) and produces PENDING Recommendations.

Path selection:
- LLM configured -> single JSON-mode completion (cached in Redis by fleet fingerprint)
- no LLM, or any LLM error (transport, malformed JSON, missing array) -> demo generator

No retry, no backoff.
"""

import json
import logging
import random
import secrets
import time
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone

from gander.config import settings
from gander.data import maintenance_checklists
from gander.data.fleet import FLEET, aircraft_id_for_tail
from gander.models.maintenance import URGENCY_LEVELS, Recommendation, TimeWindow
from gander.services.cache_service import cache_service
from gander.services.llm_client import llm_client
from gander.services.recommendation import seasonal
from gander.services.recommendation.config import (
    DEMO_MAINTENANCE_TYPES,
    recommendation_config,
)
from gander.services.recommendation.prompts import load_prompt

logger = logging.getLogger(__name__)

cfg = recommendation_config


# ---------- Data structures ----------


@dataclass
class GeneratorInput:
    """Everything the generator knows about one aircraft."""

    aircraft: dict
    utilization: dict
    flight_history_size: int = 0
    schedule_demand: dict | None = None
    seasonal: dict | None = None

    @property
    def tail_number(self) -> str:
        return self.aircraft["tail_number"]

    def summary(self, today: date) -> dict:
        """Prompt payload for this aircraft."""
        last = self.aircraft.get("last_inspection") or {}
        peak = seasonal.is_peak_season(today)
        return {
            "tailNumber": self.tail_number,
            "type": f"{self.aircraft['make']} {self.aircraft['model']}",
            "hours": self.aircraft["total_aircraft_time"],
            "cycles": self.aircraft["total_cycles"],
            "utilization": self.utilization.get("utilization_percentage", 0),
            "risk": self.utilization.get("maintenance_risk", "MEDIUM"),
            "trend": self.utilization.get("trend", "STABLE"),
            "recentFlights": self.flight_history_size,
            "lastInspection": {
                "type": last.get("type"),
                "date": str(last.get("date")) if last.get("date") else None,
            },
            "scheduleDemand": self.schedule_demand
            or seasonal.default_schedule_demand(self.utilization, peak),
            "seasonalFactors": self.seasonal or seasonal.seasonal_context(today),
        }


@dataclass
class GenerationResult:
    recommendations: list[Recommendation] = field(default_factory=list)
    source: str = "demo"  # "llm" | "cache" | "demo"

    @property
    def ai_powered(self) -> bool:
        return self.source in ("llm", "cache")


def build_fleet_inputs(fleet: dict | None = None) -> list[GeneratorInput]:
    """Generator inputs for every aircraft in the registry."""
    fleet = FLEET if fleet is None else fleet
    return [
        GeneratorInput(
            aircraft=aircraft,
            utilization=aircraft["utilization"],
            flight_history_size=aircraft["utilization"].get("recent_flights", 0),
        )
        for aircraft in fleet.values()
    ]


def new_recommendation_id() -> str:
    return f"rec-{int(time.time() * 1000)}-{secrets.token_hex(5)[:9]}"


# ---------- Generator ----------


class RecommendationGenerator:
    """LLM-backed recommendation generator with a scored-heuristic fallback."""

    def __init__(self, llm=None, cache=None, rng: random.Random | None = None):
        self._llm = llm or llm_client
        self._cache = cache or cache_service
        self._rng = rng or random.Random()

    async def generate(
        self,
        inputs: list[GeneratorInput],
        today: date | None = None,
    ) -> GenerationResult:
        """Generate recommendations for the given aircraft.

        Never raises for upstream failures: any LLM problem, including an empty
        result, falls back to demo mode.
        """
        today = today or datetime.now(timezone.utc).date()
        if not inputs:
            return GenerationResult()

        if self._llm.available:
            try:
                return await self._llm_generate(inputs, today)
            except Exception as e:
                logger.warning(f"LLM recommendation generation failed, using demo mode: {e}")
        else:
            logger.info("No LLM provider configured, using demo recommendations")

        return GenerationResult(
            recommendations=self.demo_recommendations(inputs, today),
            source="demo",
        )

    # ---- LLM path ----

    async def _llm_generate(self, inputs: list[GeneratorInput], today: date) -> GenerationResult:
        fleet_payload = [i.summary(today) for i in inputs]
        fingerprint = self._cache.fleet_fingerprint({"date": str(today), "fleet": fleet_payload})

        if settings.recommendation_cache_enabled:
            cached = await self._cache.get_recommendations(fingerprint)
            if cached:
                logger.info(f"Using cached LLM recommendations ({len(cached)} items)")
                return GenerationResult(
                    recommendations=self._from_llm_items(cached, inputs),
                    source="cache",
                )

        raw = await self._llm.complete(
            system=load_prompt("maintenance_scheduler_guide.md"),
            user=self._build_user_prompt(fleet_payload, today),
            max_tokens=cfg.llm.max_tokens,
            temperature=cfg.llm.temperature,
            json_mode=cfg.llm.json_mode,
            model_primary=cfg.llm.model_primary,
            model_fallback=cfg.llm.model_fallback,
        )
        items = _parse_llm_items(raw)
        if not items:
            raise ValueError("LLM response contained no recommendations")

        if settings.recommendation_cache_enabled:
            await self._cache.set_recommendations(fingerprint, items)

        recommendations = self._from_llm_items(items, inputs)
        logger.info(f"Generated {len(recommendations)} LLM recommendations")
        return GenerationResult(recommendations=recommendations, source="llm")

    def _build_user_prompt(self, fleet_payload: list[dict], today: date) -> str:
        season = seasonal.current_season(today)
        peak = seasonal.is_peak_season(today)
        return (
            "Analyze the following aircraft fleet and provide maintenance recommendations "
            "with heavy emphasis on schedule demand trends and seasonal factors.\n\n"
            f"FLEET DATA:\n{json.dumps(fleet_payload, indent=2, default=str)}\n\n"
            "CURRENT OPERATIONAL CONTEXT:\n"
            f"- Date: {today.isoformat()}\n"
            f"- Season: {season}\n"
            f"- Peak Season Status: {'ACTIVE PEAK PERIOD' if peak else 'Off-Peak Period'}\n"
            f"- Maintenance Window Quality: {seasonal.maintenance_window_opportunity(today)}\n"
        )

    def _from_llm_items(self, items: list[dict], inputs: list[GeneratorInput]) -> list[Recommendation]:
        known_tails = {i.tail_number for i in inputs}
        now = datetime.now(timezone.utc)
        recommendations = []
        for item in items:
            normalized = normalize_llm_item(item)
            tail = normalized["tail_number"] or "Unknown"
            if tail.upper() in known_tails:
                tail = tail.upper()
            suggested = now + timedelta(days=normalized["date_offset_days"])
            recommendations.append(
                _build_recommendation(
                    tail_number=tail,
                    maintenance_type=normalized["maintenance_type"],
                    urgency=normalized["priority"],
                    confidence=normalized["confidence"],
                    reasoning=normalized["reasoning"],
                    cost=normalized["estimated_cost"],
                    duration=normalized["estimated_duration"],
                    suggested=suggested,
                    risk_factors=normalized["risk_factors"],
                    compliance=normalized["compliance_requirements"],
                    now=now,
                )
            )
        return recommendations

    # ---- Demo path ----

    def demo_recommendations(self, inputs: list[GeneratorInput], today: date) -> list[Recommendation]:
        """Scored-heuristic recommendations; confidence always within the demo bounds."""
        now = datetime.now(timezone.utc)
        season = seasonal.current_season(today)
        peak = seasonal.is_peak_season(today)
        window = seasonal.maintenance_window_opportunity(today)
        lim = cfg.limits

        recommendations: list[Recommendation] = []
        for inp in inputs:
            util = inp.utilization
            demand = inp.schedule_demand or {
                "current_period_demand": "HIGH" if peak else "MEDIUM",
                "upcoming_bookings": self._rng.randint(10, 29),
                "average_weekly_utilization": util.get("utilization_percentage", 0),
                "demand_trend": util.get("trend", "STABLE"),
                "operational_pressure": "HIGH" if peak else "MEDIUM",
            }
            season_ctx = inp.seasonal or seasonal.seasonal_context(today)

            count = int(util.get("utilization_percentage", 0) // lim.utilization_per_recommendation)
            count = min(lim.max_per_aircraft, max(lim.min_per_aircraft, count))

            for i in range(count):
                maintenance_type = self._rng.choice(DEMO_MAINTENANCE_TYPES)
                confidence = self._demo_confidence(inp, demand, season_ctx, window)
                suggested = now + timedelta(days=lim.first_offset_days + i * lim.offset_step_days)
                recommendations.append(
                    _build_recommendation(
                        tail_number=inp.tail_number,
                        maintenance_type=maintenance_type,
                        urgency=_demo_priority(demand, util),
                        confidence=confidence,
                        reasoning=_demo_reasoning(util, demand, season_ctx, season, peak, window),
                        cost=cfg.cost_for(maintenance_type),
                        duration=cfg.duration_for(maintenance_type),
                        suggested=suggested,
                        risk_factors=_risk_factors(util, maintenance_type, demand, season_ctx),
                        compliance=cfg.compliance_for(maintenance_type),
                        now=now,
                    )
                )

        return recommendations[: lim.total_max]

    def _demo_confidence(self, inp: GeneratorInput, demand: dict, season_ctx: dict, window: str) -> float:
        adj = cfg.adjustments
        bounds = cfg.confidence
        util = inp.utilization
        confidence = bounds.demo_base

        period = demand.get("current_period_demand")
        if period == "LOW" and window == "EXCELLENT":
            confidence += adj.low_demand_excellent_window
        elif period == "HIGH" and window == "POOR":
            confidence += adj.high_demand_poor_window
        elif period == "MEDIUM":
            confidence += adj.medium_demand

        opportunity = season_ctx.get("maintenance_window_opportunity")
        if opportunity == "EXCELLENT":
            confidence += adj.window_excellent
        elif opportunity == "POOR":
            confidence += adj.window_poor

        if inp.flight_history_size > 20:
            confidence += adj.history_over_20
        elif inp.flight_history_size > 10:
            confidence += adj.history_over_10

        pct = util.get("utilization_percentage", 0)
        if pct > 70:
            confidence += adj.utilization_over_70
        elif pct > 40:
            confidence += adj.utilization_over_40
        else:
            confidence += adj.utilization_low

        risk = util.get("maintenance_risk")
        if risk == "HIGH":
            confidence += adj.risk_high
        elif risk == "LOW":
            confidence += adj.risk_low

        confidence += (self._rng.random() - 0.5) * bounds.demo_jitter
        confidence = round(confidence * 10) / 10
        return max(bounds.demo_min, min(bounds.demo_max, confidence))


# ---------- Helpers ----------


def _parse_llm_items(raw: str) -> list[dict]:
    """Extract the recommendations array; raises ValueError on malformed output."""
    text = raw.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else text[3:]
        if text.endswith("```"):
            text = text[:-3]
        text = text.strip()

    parsed = json.loads(text)
    items = parsed.get("recommendations") if isinstance(parsed, dict) else None
    if not isinstance(items, list):
        raise ValueError("Invalid AI response format: missing recommendations array")
    return [item for item in items if isinstance(item, dict)]


def _number(value, default: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    return number or default


def normalize_llm_item(item: dict) -> dict:
    """Apply defaults and clamping to one LLM-returned recommendation."""
    defaults = cfg.llm_defaults
    bounds = cfg.confidence
    maintenance_type = item.get("maintenanceType") or defaults.maintenance_type

    priority = str(item.get("priority") or defaults.priority).upper()
    if priority not in URGENCY_LEVELS:
        priority = defaults.priority

    confidence = _number(item.get("confidence"), bounds.llm_default)
    confidence = max(bounds.llm_min, min(bounds.llm_max, confidence))

    reasoning = item.get("reasoning") or defaults.reasoning
    if isinstance(reasoning, str):
        reasoning = [reasoning]

    risk_factors = item.get("riskFactors")
    if not isinstance(risk_factors, list):
        risk_factors = list(defaults.risk_factors)

    compliance = item.get("complianceRequirements")
    if not isinstance(compliance, list):
        compliance = cfg.compliance_for(maintenance_type)

    return {
        "tail_number": str(item.get("tailNumber") or ""),
        "maintenance_type": maintenance_type,
        "priority": priority,
        "confidence": confidence,
        "reasoning": [str(r) for r in reasoning],
        "estimated_cost": _number(item.get("estimatedCost"), defaults.cost),
        "estimated_duration": _number(item.get("estimatedDuration"), defaults.duration),
        "date_offset_days": int(_number(item.get("suggestedDateOffset"), defaults.date_offset_days)),
        "risk_factors": [str(r) for r in risk_factors],
        "compliance_requirements": [str(c) for c in compliance],
    }


def _build_recommendation(
    *,
    tail_number: str,
    maintenance_type: str,
    urgency: str,
    confidence: float,
    reasoning: list[str] | str,
    cost: float,
    duration: float,
    suggested: datetime,
    risk_factors: list[str],
    compliance: list[str],
    now: datetime,
) -> Recommendation:
    lim = cfg.limits
    return Recommendation(
        id=new_recommendation_id(),
        aircraft_id=aircraft_id_for_tail(tail_number),
        tail_number=tail_number,
        maintenance_type=maintenance_type,
        ai_confidence=round(confidence / 100, 3),
        estimated_cost=cost,
        estimated_downtime=duration,
        urgency=urgency,
        time_window=TimeWindow(
            earliest=suggested - timedelta(days=lim.window_before_days),
            latest=suggested + timedelta(days=lim.window_after_days),
            optimal=suggested,
        ),
        reasoning=[reasoning] if isinstance(reasoning, str) else list(reasoning),
        risk_factors=risk_factors,
        compliance_requirements=compliance,
        required_personnel=maintenance_checklists.get_required_personnel(maintenance_type),
        created_at=now,
    )


def _demo_priority(demand: dict, utilization: dict) -> str:
    pressure = demand.get("operational_pressure")
    risk = utilization.get("maintenance_risk")
    if pressure == "HIGH" and risk == "HIGH":
        return "HIGH"
    if pressure == "HIGH" or risk == "MEDIUM":
        return "MEDIUM"
    return "LOW"


def _demo_reasoning(
    utilization: dict,
    demand: dict,
    season_ctx: dict,
    season: str,
    peak: bool,
    window: str,
) -> str:
    period = f"{'peak' if peak else 'off-peak'} {season.lower()} period"
    reasoning = (
        f"Enhanced AI Analysis: Given current "
        f"{str(demand.get('current_period_demand', 'MEDIUM')).lower()} operational demand "
        f"during this {period}, with {window.lower()} maintenance window opportunity available. "
    )
    weather = season_ctx.get("weather_factors") or []
    if weather:
        reasoning += f"Seasonal factors include {weather[0].lower()}. "
    if demand.get("operational_pressure") == "HIGH":
        reasoning += "High operational pressure suggests limited flexibility for extended maintenance. "
    else:
        reasoning += "Current schedule allows for planned maintenance windows. "
    reasoning += (
        f"Aircraft utilization at {utilization.get('utilization_percentage', 0)}% with "
        f"{str(utilization.get('trend', 'STABLE')).lower()} pattern and "
        f"{str(utilization.get('maintenance_risk', 'MEDIUM')).lower()} risk profile "
        "supports this maintenance timing."
    )
    return reasoning


def _risk_factors(utilization: dict, maintenance_type: str, demand: dict, season_ctx: dict) -> list[str]:
    factors = []
    # Demand first
    if demand.get("operational_pressure") == "HIGH":
        factors.append("High operational pressure limiting maintenance windows")
    if demand.get("current_period_demand") == "PEAK":
        factors.append("Peak demand period reducing aircraft availability")
    if demand.get("demand_trend") == "INCREASING":
        factors.append("Increasing demand trend affecting scheduling flexibility")

    if season_ctx.get("peak_season"):
        factors.append("Peak season operational constraints")
    if season_ctx.get("maintenance_window_opportunity") == "POOR":
        factors.append("Limited seasonal maintenance windows")
    weather = season_ctx.get("weather_factors") or []
    if weather:
        factors.append(f"Seasonal weather: {weather[0].lower()}")

    if utilization.get("utilization_percentage", 0) > 75:
        factors.append("High utilization rate")
    if utilization.get("maintenance_risk") == "HIGH":
        factors.append("Elevated maintenance risk")
    if utilization.get("trend") == "INCREASING":
        factors.append("Increasing flight activity")
    if "CHECK" in maintenance_type:
        factors.append("Scheduled inspection due")

    return factors or ["Standard maintenance interval"]


# Singleton
recommendation_generator = RecommendationGenerator()
