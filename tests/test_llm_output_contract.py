import json

import pytest

from llm_synthesis.schema import BudgetRecommendation, MediaAnalysisOutput, RecommendationsOutput
from llm_synthesis.validator import (
    LLMOutputValidationError,
    validate_analysis_output,
    validate_recommendations_output,
)


def _analysis_payload() -> dict:
    return {
        "overallPerformance": {
            "summary": "Facebook drives reach at a moderate CPM.",
            "topChannels": ["Facebook"],
            "keyMetrics": {"avgCTR": 2.3, "avgCPM": 15.5, "totalReach": 45000, "avgFrequency": 2.1},
        },
        "channelAnalysis": [
            {
                "channel": "Facebook",
                "performance": "good",
                "metrics": {"ctr": 2.3, "cpm": 15.5, "reach": 45000},
                "insights": "Solid engagement.",
            }
        ],
        "demographicInsights": {"bestPerformingDemo": "25-34", "insights": "Younger skew."},
        "optimizationOpportunities": ["Test video creatives"],
    }


def _recommendations_payload() -> dict:
    return {
        "budgetReallocation": {
            "recommendations": [
                {
                    "channel": "Facebook",
                    "currentBudget": 10000,
                    "recommendedBudget": 12000,
                    "reasoning": "Efficient reach.",
                }
            ]
        },
        "channelRecommendations": [
            {
                "channel": "Facebook",
                "action": "increase",
                "reasoning": "Strong CTR.",
                "expectedImprovement": "+10% reach",
            }
        ],
        "targetingRecommendations": {
            "demographics": ["25-34"],
            "geography": ["US"],
            "reasoning": "Best response.",
        },
        "creativeTesting": ["Carousel vs single image"],
        "nextSteps": [{"action": "Shift budget", "priority": "high", "timeline": "1 week"}],
    }


def test_analysis_output_contract() -> None:
    output = validate_analysis_output(json.dumps(_analysis_payload()))

    assert isinstance(output, MediaAnalysisOutput)
    assert output.overall_performance.top_channels == ["Facebook"]
    assert output.overall_performance.key_metrics.avg_ctr == 2.3
    assert output.overall_performance.key_metrics.avg_cpm == 15.5
    assert output.channel_analysis[0].metrics.reach == 45000
    assert output.demographic_insights.best_performing_demo == "25-34"

    dumped = output.model_dump(by_alias=True)
    assert dumped["overallPerformance"]["keyMetrics"]["avgCTR"] == 2.3
    assert set(dumped) == {
        "overallPerformance",
        "channelAnalysis",
        "demographicInsights",
        "optimizationOpportunities",
    }


def test_recommendations_output_contract() -> None:
    output = validate_recommendations_output(json.dumps(_recommendations_payload()))

    assert isinstance(output, RecommendationsOutput)
    assert output.budget_reallocation.recommendations[0].change_percent == 20
    assert output.channel_recommendations[0].expected_improvement == "+10% reach"
    assert output.targeting_recommendations.geography == ["US"]
    assert output.next_steps[0].priority == "high"


def test_markdown_fences_are_stripped() -> None:
    raw = "```json\n" + json.dumps(_analysis_payload()) + "\n```"

    output = validate_analysis_output(raw)

    assert output.channel_analysis[0].channel == "Facebook"


def test_malformed_json_is_a_hard_failure() -> None:
    with pytest.raises(LLMOutputValidationError) as exc_info:
        validate_analysis_output("Here is your analysis: {not json")

    assert exc_info.value.stage == "json_parse"
    assert exc_info.value.raw_response == "Here is your analysis: {not json"


def test_top_level_must_be_an_object() -> None:
    with pytest.raises(LLMOutputValidationError) as exc_info:
        validate_recommendations_output("[1, 2, 3]")

    assert exc_info.value.stage == "schema"


def test_wrong_shape_fails_schema_stage() -> None:
    with pytest.raises(LLMOutputValidationError) as exc_info:
        validate_analysis_output(json.dumps({"channelAnalysis": "Facebook"}))

    assert exc_info.value.stage == "schema"
    assert any("channelAnalysis" in error for error in exc_info.value.errors)


def test_missing_and_unknown_keys_are_tolerated() -> None:
    output = validate_analysis_output(json.dumps({"overallPerformance": {"summary": "ok"}, "extra": 1}))

    assert output.overall_performance.summary == "ok"
    assert output.channel_analysis == []
    assert output.overall_performance.key_metrics.avg_ctr is None


def test_numeric_text_fields_are_coerced() -> None:
    output = validate_recommendations_output(
        json.dumps({"nextSteps": [{"action": "Review", "priority": 1, "timeline": 2}]})
    )

    assert output.next_steps[0].priority == "1"
    assert output.next_steps[0].timeline == "2"


@pytest.mark.parametrize(
    ("current", "recommended", "expected"),
    [
        (10000, 12000, 20),
        (8000, 6000, -25),
        (3000, 3100, 3),
        (0, 5000, None),
        (None, 5000, None),
        (5000, None, None),
    ],
)
def test_budget_change_percent(current, recommended, expected) -> None:
    recommendation = BudgetRecommendation(current_budget=current, recommended_budget=recommended)

    assert recommendation.change_percent == expected
