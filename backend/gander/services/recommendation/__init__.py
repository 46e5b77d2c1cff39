"""Recommendation engine: maintenance recommendations for the fleet.

Modules:
    config      Confidence bounds, limits and cost/duration/compliance tables
    seasonal    Season, weather and schedule-demand context
    generator   Single LLM call over the fleet with a scored-heuristic fallback
    prompts     System guide for the LLM path

Pipeline:
    build_fleet_inputs → RecommendationGenerator.generate → RecommendationStore.replace_all
"""
