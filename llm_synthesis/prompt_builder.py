"""Structured prompt builder for media campaign narratives."""

import json
from typing import Any

from app.domain.media_data import AIPayload
from llm_synthesis.schema import MediaAnalysisOutput

_ANALYSIS_EXAMPLE = json.dumps(
    {
        "overallPerformance": {
            "summary": "brief performance summary",
            "topChannels": ["channel1", "channel2", "channel3"],
            "keyMetrics": {
                "avgCTR": 0.0,
                "avgCPM": 0.0,
                "totalReach": 0,
                "avgFrequency": 0.0,
            },
        },
        "channelAnalysis": [
            {
                "channel": "channel name",
                "performance": "excellent/good/poor",
                "metrics": {"ctr": 0.0, "cpm": 0.0, "reach": 0},
                "insights": "key insights about this channel",
            }
        ],
        "demographicInsights": {
            "bestPerformingDemo": "demographic segment",
            "insights": "demographic analysis",
        },
        "optimizationOpportunities": [
            "opportunity 1",
            "opportunity 2",
            "opportunity 3",
        ],
    },
    indent=2,
)

_RECOMMENDATIONS_EXAMPLE = json.dumps(
    {
        "budgetReallocation": {
            "recommendations": [
                {
                    "channel": "channel name",
                    "currentBudget": 0,
                    "recommendedBudget": 0,
                    "reasoning": "explanation",
                }
            ]
        },
        "channelRecommendations": [
            {
                "channel": "channel name",
                "action": "increase/decrease/maintain/test",
                "reasoning": "detailed reasoning",
                "expectedImprovement": "percentage or metric improvement",
            }
        ],
        "targetingRecommendations": {
            "demographics": ["demo1", "demo2"],
            "geography": ["geo1", "geo2"],
            "reasoning": "targeting strategy explanation",
        },
        "creativeTesting": [
            "creative test suggestion 1",
            "creative test suggestion 2",
        ],
        "nextSteps": [
            {"action": "action item", "priority": "high/medium/low", "timeline": "timeframe"}
        ],
    },
    indent=2,
)

_ANALYST_INSTRUCTIONS = """\
You are an expert media planner and data analyst.

STRICT RULES:
- Use ONLY the data provided below. Do not invent channels or metrics.
- Return strictly valid JSON matching the structure shown below.
- Do NOT include any text outside the JSON object.
- Do NOT wrap the JSON in markdown code fences.
"""

_SECTION_TEMPLATE = """\
## {title}
```json
{data}
```
"""

ANALYSIS_TASK_MARKER = "# TASK: CAMPAIGN ANALYSIS"
RECOMMENDATIONS_TASK_MARKER = "# TASK: STRATEGIC RECOMMENDATIONS"


class MediaPromptBuilder:
    """Builds deterministic prompts for the two narrative requests.

    The analysis prompt carries the prepared AI payload; the recommendations
    prompt carries the parsed analysis result.
    """

    def build_analysis_prompt(self, payload: AIPayload) -> str:
        """Build the campaign analysis prompt.

        Args:
            payload: Prepared payload with headers, mappings, metrics and a
                bounded row sample.

        Returns:
            A fully formatted prompt string.
        """
        data = payload.to_dict()
        sections = self._format_data_sections(
            campaign_data_headers=data["originalHeaders"],
            recognised_columns={
                "foundColumns": data["foundColumns"],
                "mappedColumns": data["mappedColumns"],
                "dataQuality": data["dataQuality"],
                "hasChannelData": data["hasChannelData"],
            },
            basic_metrics=data["basicMetrics"],
            sample_data_rows=data["sampleRows"],
            total_rows=data["totalRows"],
        )
        return (
            f"{_ANALYST_INSTRUCTIONS}\n"
            f"# PROVIDED DATA\n\n{sections}\n"
            f"# OUTPUT STRUCTURE\n\n"
            f"```json\n{_ANALYSIS_EXAMPLE}\n```\n\n"
            f"{ANALYSIS_TASK_MARKER}\n\n"
            f"Analyze this advertising campaign data and provide comprehensive "
            f"insights as a single JSON object with the structure above."
        )

    def build_recommendations_prompt(self, analysis: MediaAnalysisOutput) -> str:
        """Build the strategic recommendations prompt from an analysis.

        Args:
            analysis: Parsed result of the analysis request.

        Returns:
            A fully formatted prompt string.
        """
        sections = self._format_data_sections(
            analysis_results=analysis.model_dump(by_alias=True),
        )
        return (
            f"{_ANALYST_INSTRUCTIONS}\n"
            f"# PROVIDED DATA\n\n{sections}\n"
            f"# OUTPUT STRUCTURE\n\n"
            f"```json\n{_RECOMMENDATIONS_EXAMPLE}\n```\n\n"
            f"{RECOMMENDATIONS_TASK_MARKER}\n\n"
            f"Based on this media campaign analysis, provide strategic "
            f"recommendations for future campaigns as a single JSON object "
            f"with the structure above."
        )

    def _format_data_sections(self, **data: Any) -> str:
        """Format each value as a labeled JSON section."""
        parts = []
        for key, value in data.items():
            title = key.replace("_", " ").title()
            body = json.dumps(value, indent=2, default=str)
            parts.append(_SECTION_TEMPLATE.format(title=title, data=body))
        return "\n".join(parts)


def prompt_kind(prompt: str) -> str:
    """Return ``"recommendations"`` or ``"analysis"`` for a built prompt."""
    if RECOMMENDATIONS_TASK_MARKER in prompt:
        return "recommendations"
    return "analysis"

