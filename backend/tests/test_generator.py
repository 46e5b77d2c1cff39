import json
import random
from datetime import date

import pytest

from conftest import FakeLLM
from gander.config import settings
from gander.services.recommendation.generator import (
    GeneratorInput,
    RecommendationGenerator,
    build_fleet_inputs,
    normalize_llm_item,
)

TODAY = date(2025, 10, 15)  # off-peak, EXCELLENT window


def _generator(llm=None, cache=None, seed=7):
    return RecommendationGenerator(
        llm=llm or FakeLLM(available=False),
        cache=cache,
        rng=random.Random(seed),
    )


class TestDemoGenerator:
    async def test_demo_used_when_no_llm(self):
        result = await _generator().generate(build_fleet_inputs(), today=TODAY)

        assert result.source == "demo"
        assert result.ai_powered is False
        # 82% -> 3, 55% -> 2, 31% -> clamped up to 2
        assert len(result.recommendations) == 7

    async def test_confidence_stays_in_demo_bounds(self):
        for seed in range(20):
            result = await _generator(seed=seed).generate(build_fleet_inputs(), today=TODAY)
            for rec in result.recommendations:
                assert 0.52 <= rec.ai_confidence <= 0.94
                assert rec.status == "PENDING"

    async def test_total_capped_at_fifteen(self):
        inputs = build_fleet_inputs() * 3
        for inp in inputs:
            inp.utilization = {**inp.utilization, "utilization_percentage": 100}
        result = await _generator().generate(inputs, today=TODAY)
        assert len(result.recommendations) == 15

    async def test_suggested_dates_step_two_weeks(self):
        result = await _generator().generate(build_fleet_inputs()[:1], today=TODAY)
        optimal = [r.time_window.optimal for r in result.recommendations]
        assert (optimal[1] - optimal[0]).days == 14
        window = result.recommendations[0].time_window
        assert (window.latest - window.earliest).days == 14

    async def test_priority_rules(self):
        aircraft = build_fleet_inputs()[0].aircraft

        def _input(risk: str, pressure: str) -> GeneratorInput:
            return GeneratorInput(
                aircraft=aircraft,
                utilization={"utilization_percentage": 50, "maintenance_risk": risk, "trend": "STABLE"},
                schedule_demand={"current_period_demand": "MEDIUM", "operational_pressure": pressure},
            )

        gen = _generator()
        high = gen.demo_recommendations([_input("HIGH", "HIGH")], TODAY)
        medium = gen.demo_recommendations([_input("MEDIUM", "LOW")], TODAY)
        low = gen.demo_recommendations([_input("LOW", "LOW")], TODAY)

        assert {r.urgency for r in high} == {"HIGH"}
        assert {r.urgency for r in medium} == {"MEDIUM"}
        assert {r.urgency for r in low} == {"LOW"}

    async def test_reasoning_leads_with_demand(self):
        result = await _generator().generate(build_fleet_inputs()[:1], today=TODAY)
        reasoning = result.recommendations[0].reasoning[0]
        assert reasoning.startswith("Enhanced AI Analysis: Given current medium operational demand")
        assert "off-peak fall period" in reasoning

    async def test_empty_input(self):
        result = await _generator().generate([], today=TODAY)
        assert result.recommendations == []


class TestLLMPath:
    async def test_llm_items_normalized(self):
        response = json.dumps({
            "recommendations": [
                {"tailNumber": "n123ab", "maintenanceType": "C_CHECK", "confidence": 99,
                 "priority": "HIGH", "estimatedCost": 85000, "estimatedDuration": 120,
                 "suggestedDateOffset": 21, "reasoning": "Heavy check due"},
                {"tailNumber": "N456CD", "confidence": 10},
            ]
        })
        llm = FakeLLM(response=response)
        result = await _generator(llm=llm).generate(build_fleet_inputs(), today=TODAY)

        assert result.source == "llm"
        assert result.ai_powered is True
        first, second = result.recommendations
        assert first.tail_number == "N123AB"
        assert first.aircraft_id == "n123ab"
        assert first.ai_confidence == 0.95
        assert first.reasoning == ["Heavy check due"]
        assert second.ai_confidence == 0.5
        assert second.maintenance_type == "A_CHECK"
        assert second.urgency == "MEDIUM"
        assert second.estimated_cost == 10000

    async def test_fenced_json_accepted(self):
        response = "```json\n" + json.dumps({"recommendations": [{"tailNumber": "N789XY"}]}) + "\n```"
        result = await _generator(llm=FakeLLM(response=response)).generate(build_fleet_inputs(), today=TODAY)
        assert result.source == "llm"
        assert result.recommendations[0].ai_confidence == 0.75

    @pytest.mark.parametrize("response", ["not json", json.dumps({"items": []}), json.dumps([1, 2])])
    async def test_malformed_response_falls_back_to_demo(self, response):
        llm = FakeLLM(response=response)
        result = await _generator(llm=llm).generate(build_fleet_inputs(), today=TODAY)
        assert llm.calls == 1
        assert result.source == "demo"
        assert len(result.recommendations) == 7

    async def test_empty_recommendation_list_falls_back_to_demo(self):
        llm = FakeLLM(response=json.dumps({"recommendations": []}))
        result = await _generator(llm=llm).generate(build_fleet_inputs(), today=TODAY)
        assert llm.calls == 1
        assert result.source == "demo"
        assert result.ai_powered is False
        assert len(result.recommendations) == 7

    async def test_transport_error_falls_back_to_demo(self):
        llm = FakeLLM(error=RuntimeError("upstream 503"))
        result = await _generator(llm=llm).generate(build_fleet_inputs(), today=TODAY)
        assert result.source == "demo"

    async def test_cache_hit_skips_llm(self, monkeypatch, fake_cache):
        monkeypatch.setattr(settings, "recommendation_cache_enabled", True)
        response = json.dumps({"recommendations": [{"tailNumber": "N123AB", "confidence": 80}]})
        llm = FakeLLM(response=response)
        gen = _generator(llm=llm, cache=fake_cache)

        first = await gen.generate(build_fleet_inputs(), today=TODAY)
        second = await gen.generate(build_fleet_inputs(), today=TODAY)

        assert first.source == "llm"
        assert second.source == "cache"
        assert llm.calls == 1
        assert second.recommendations[0].ai_confidence == 0.8


def test_normalize_defaults():
    item = normalize_llm_item({})
    assert item["maintenance_type"] == "A_CHECK"
    assert item["priority"] == "MEDIUM"
    assert item["confidence"] == 75
    assert item["estimated_duration"] == 8
    assert item["date_offset_days"] == 7
    assert item["compliance_requirements"]


def test_normalize_rejects_unknown_priority():
    assert normalize_llm_item({"priority": "urgent-ish"})["priority"] == "MEDIUM"
    assert normalize_llm_item({"priority": "critical"})["priority"] == "CRITICAL"
