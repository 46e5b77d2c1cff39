"""Recommendation generator configuration: single source for all tables and thresholds."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ConfidenceBounds:
    """Confidence ranges, in percent."""
    llm_min: float = 50.0
    llm_max: float = 95.0
    llm_default: float = 75.0
    demo_min: float = 52.0
    demo_max: float = 94.0
    demo_base: float = 65.0
    demo_jitter: float = 15.0       # total spread, i.e. ±7.5


@dataclass(frozen=True)
class DemoAdjustments:
    """Additive confidence adjustments for the demo generator."""
    low_demand_excellent_window: float = 20.0
    high_demand_poor_window: float = -15.0
    medium_demand: float = 8.0
    window_excellent: float = 15.0
    window_poor: float = -12.0
    history_over_20: float = 10.0
    history_over_10: float = 5.0
    utilization_over_70: float = 8.0
    utilization_over_40: float = 4.0
    utilization_low: float = -5.0
    risk_high: float = 8.0
    risk_low: float = -3.0


@dataclass(frozen=True)
class GeneratorLimits:
    min_per_aircraft: int = 2
    max_per_aircraft: int = 4
    utilization_per_recommendation: int = 25   # 1 recommendation per 25% utilization
    total_max: int = 15
    first_offset_days: int = 7
    offset_step_days: int = 14
    window_before_days: int = 7
    window_after_days: int = 7


@dataclass(frozen=True)
class LLMDefaults:
    """Defaults applied to each LLM-returned item when a field is missing."""
    maintenance_type: str = "A_CHECK"
    priority: str = "MEDIUM"
    cost: float = 10000
    duration: float = 8
    date_offset_days: int = 7
    reasoning: str = "AI-generated maintenance recommendation"
    risk_factors: tuple = ("Standard maintenance",)


@dataclass(frozen=True)
class LLMParams:
    """Parameters for the generator LLM call."""
    model_primary: str = "gpt-4o-mini"
    model_fallback: str = "claude-sonnet-4-5-20250929"
    max_tokens: int = 4000
    temperature: float = 0.3
    json_mode: bool = True


DEMO_MAINTENANCE_TYPES = (
    "A_CHECK",
    "B_CHECK",
    "C_CHECK",
    "100_HOUR",
    "ANNUAL",
    "PROGRESSIVE",
    "AD_COMPLIANCE",
)

# USD
MAINTENANCE_COSTS: dict[str, float] = {
    "A_CHECK": 15000,
    "B_CHECK": 35000,
    "C_CHECK": 85000,
    "D_CHECK": 200000,
    "100_HOUR": 4000,
    "ANNUAL": 18000,
    "PROGRESSIVE": 25000,
    "AD_COMPLIANCE": 8000,
    "SB_COMPLIANCE": 12000,
    "ENGINE_OVERHAUL": 450000,
    "PROP_OVERHAUL": 25000,
}

# Hours of downtime
MAINTENANCE_DURATIONS: dict[str, float] = {
    "A_CHECK": 8,
    "B_CHECK": 24,
    "C_CHECK": 120,
    "D_CHECK": 720,
    "100_HOUR": 4,
    "ANNUAL": 36,
    "PROGRESSIVE": 16,
    "AD_COMPLIANCE": 6,
    "SB_COMPLIANCE": 12,
    "ENGINE_OVERHAUL": 240,
    "PROP_OVERHAUL": 48,
}

COMPLIANCE_REQUIREMENTS: dict[str, list[str]] = {
    "A_CHECK": ["FAR 91.409", "FAR 135.421"],
    "B_CHECK": ["FAR 91.409", "FAR 135.421", "FAR 145.109"],
    "C_CHECK": ["FAR 91.409", "FAR 135.421", "FAR 145.109"],
    "ANNUAL": ["FAR 91.409", "FAR 91.411"],
    "100_HOUR": ["FAR 91.409", "FAR 135.421"],
    "AD_COMPLIANCE": ["FAR 39.7", "FAR 91.403"],
    "ENGINE_OVERHAUL": ["FAR 91.421", "FAR 135.421"],
}
DEFAULT_COMPLIANCE = ["FAR 91.409"]


@dataclass(frozen=True)
class RecommendationConfig:
    """Top-level config aggregating all sub-configs."""
    confidence: ConfidenceBounds = field(default_factory=ConfidenceBounds)
    adjustments: DemoAdjustments = field(default_factory=DemoAdjustments)
    limits: GeneratorLimits = field(default_factory=GeneratorLimits)
    llm_defaults: LLMDefaults = field(default_factory=LLMDefaults)
    llm: LLMParams = field(default_factory=LLMParams)

    def cost_for(self, maintenance_type: str) -> float:
        return MAINTENANCE_COSTS.get(maintenance_type, self.llm_defaults.cost)

    def duration_for(self, maintenance_type: str) -> float:
        return MAINTENANCE_DURATIONS.get(maintenance_type, self.llm_defaults.duration)

    def compliance_for(self, maintenance_type: str) -> list[str]:
        return list(COMPLIANCE_REQUIREMENTS.get(maintenance_type, DEFAULT_COMPLIANCE))


# Singleton: import this everywhere
recommendation_config = RecommendationConfig()
