"""
Threshold rules that turn the last three months of activity into alerts and
tips. Rules run independently and in a fixed order so output is stable.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, asdict, field
from datetime import date
from typing import Any, Dict, List, Optional

from app.utils.aggregator import TemporalAggregator, rank_first, safe_percentage

logger = logging.getLogger(__name__)

ALERT = "alert"
TIP = "tip"


@dataclass
class Recommendation:
    kind: str
    title: str
    description: str
    severity: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class RecommendationReport:
    recommendations: List[Recommendation] = field(default_factory=list)
    has_data: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "recommendations": [r.to_dict() for r in self.recommendations],
            "hasData": self.has_data,
        }


class RecommendationEngine:
    def __init__(
        self,
        lookback_months: int = 3,
        savings_target: float = 20.0,
        category_share_limit: float = 40.0,
        spike_ratio: float = 1.3,
        minimum_recommendations: int = 2,
    ) -> None:
        self.lookback_months = lookback_months
        self.savings_target = savings_target
        self.category_share_limit = category_share_limit
        self.spike_ratio = spike_ratio
        self.minimum_recommendations = minimum_recommendations

    def savings_rate_rule(self, total_income: float, total_expenses: float) -> Optional[Recommendation]:
        if total_income <= 0:
            return None

        rate = safe_percentage(total_income - total_expenses, total_income)
        if rate < self.savings_target:
            return Recommendation(
                kind=ALERT,
                title="Low Savings Rate",
                description=(
                    f"You're saving {rate:.1f}% of your income. "
                    f"Aim for at least {self.savings_target:g}% to build financial security."
                ),
                severity="warning",
            )
        return Recommendation(
            kind=TIP,
            title="Great Savings!",
            description=f"You're saving {rate:.1f}% of your income. Keep up the good work!",
            severity="success",
        )

    def category_rule(self, category_totals: Dict[str, float], total_expenses: float) -> Optional[Recommendation]:
        top = rank_first(category_totals)
        if top is None or total_expenses <= 0:
            return None

        category, amount = top
        share = safe_percentage(amount, total_expenses)
        if share <= self.category_share_limit:
            return None
        return Recommendation(
            kind=ALERT,
            title=f"High {category} Spending",
            description=(
                f"{category} accounts for {share:.0f}% of your expenses. "
                "Consider ways to reduce this category."
            ),
            severity="danger",
        )

    def spike_rule(self, recent: float, previous: float) -> Optional[Recommendation]:
        if previous <= 0 or recent <= previous * self.spike_ratio:
            return None

        increase = safe_percentage(recent - previous, previous)
        return Recommendation(
            kind=ALERT,
            title="Spending Spike Detected",
            description=(
                f"Your spending increased by {increase:.0f}% this month. "
                "Review your recent expenses."
            ),
            severity="warning",
        )

    @staticmethod
    def track_regularly() -> Recommendation:
        return Recommendation(
            kind=TIP,
            title="Track Regularly",
            description="Keep adding transactions to get more personalized insights and better predictions.",
            severity="info",
        )

    def recommend(self, transactions: List[Dict[str, Any]], now: Optional[date] = None) -> RecommendationReport:
        aggregator = TemporalAggregator(now)
        window = aggregator.trailing_months(transactions, self.lookback_months)
        if not window:
            return RecommendationReport()

        expenses = aggregator.expenses(window)
        total_expenses = aggregator.total(expenses)
        total_income = aggregator.total(aggregator.incomes(window))
        recent, previous = aggregator.month_over_month(window)

        candidates = [
            self.savings_rate_rule(total_income, total_expenses),
            self.category_rule(aggregator.category_totals(expenses), total_expenses),
            self.spike_rule(recent, previous),
        ]
        recommendations = [rec for rec in candidates if rec is not None]
        if len(recommendations) < self.minimum_recommendations:
            recommendations.append(self.track_regularly())

        logger.debug("recommendations: %s", [rec.title for rec in recommendations])
        return RecommendationReport(recommendations=recommendations, has_data=True)
