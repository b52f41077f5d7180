"""Structured response schemas for the narrative service.

Models are deliberately lenient: missing keys fall back to empty defaults
and unknown keys are ignored, so any well-formed JSON object loads.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _ResponseModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
        str_strip_whitespace=True,
        coerce_numbers_to_str=True,
    )


# ---------------------------------------------------------------------------
# Analysis
# ---------------------------------------------------------------------------


class KeyMetrics(_ResponseModel):
    avg_ctr: Optional[float] = Field(default=None, alias="avgCTR")
    avg_cpm: Optional[float] = Field(default=None, alias="avgCPM")
    total_reach: Optional[float] = None
    avg_frequency: Optional[float] = None


class OverallPerformance(_ResponseModel):
    summary: str = ""
    top_channels: List[str] = Field(default_factory=list)
    key_metrics: KeyMetrics = Field(default_factory=KeyMetrics)


class ChannelMetrics(_ResponseModel):
    ctr: Optional[float] = None
    cpm: Optional[float] = None
    reach: Optional[float] = None


class ChannelAnalysis(_ResponseModel):
    channel: str = ""
    performance: str = ""
    metrics: ChannelMetrics = Field(default_factory=ChannelMetrics)
    insights: str = ""


class DemographicInsights(_ResponseModel):
    best_performing_demo: str = ""
    insights: str = ""


class MediaAnalysisOutput(_ResponseModel):
    """Narrative analysis of one campaign dataset."""

    overall_performance: OverallPerformance = Field(default_factory=OverallPerformance)
    channel_analysis: List[ChannelAnalysis] = Field(default_factory=list)
    demographic_insights: DemographicInsights = Field(default_factory=DemographicInsights)
    optimization_opportunities: List[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Recommendations
# ---------------------------------------------------------------------------


class BudgetRecommendation(_ResponseModel):
    channel: str = ""
    current_budget: Optional[float] = None
    recommended_budget: Optional[float] = None
    reasoning: str = ""

    @property
    def change_percent(self) -> Optional[int]:
        """Whole-percent change from current to recommended budget."""
        if not self.current_budget or self.recommended_budget is None:
            return None
        change = (self.recommended_budget - self.current_budget) / self.current_budget
        return int(round(change * 100))


class BudgetReallocation(_ResponseModel):
    recommendations: List[BudgetRecommendation] = Field(default_factory=list)


class ChannelRecommendation(_ResponseModel):
    channel: str = ""
    action: str = ""
    reasoning: str = ""
    expected_improvement: str = ""


class TargetingRecommendations(_ResponseModel):
    demographics: List[str] = Field(default_factory=list)
    geography: List[str] = Field(default_factory=list)
    reasoning: str = ""


class NextStep(_ResponseModel):
    action: str = ""
    priority: str = ""
    timeline: str = ""


class RecommendationsOutput(_ResponseModel):
    """Strategic recommendations derived from an analysis."""

    budget_reallocation: BudgetReallocation = Field(default_factory=BudgetReallocation)
    channel_recommendations: List[ChannelRecommendation] = Field(default_factory=list)
    targeting_recommendations: TargetingRecommendations = Field(
        default_factory=TargetingRecommendations
    )
    creative_testing: List[str] = Field(default_factory=list)
    next_steps: List[NextStep] = Field(default_factory=list)
