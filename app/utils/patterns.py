from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Union

from app.utils.aggregator import TemporalAggregator, months_ago, rank_first, transaction_date

logger = logging.getLogger(__name__)

TOP_CATEGORY = "Top Category"
AVG_MONTHLY = "Avg Monthly"
PEAK_DAY = "Peak Day"
TOTAL_EXPENSES = "Total Expenses"


@dataclass
class Pattern:
    """One headline figure: a label, its value and a numeric detail."""

    label: str
    value: Union[str, float, None]
    metric: float
    trend_text: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "value": self.value,
            "metric": self.metric,
            "trendText": self.trend_text,
        }


@dataclass
class PatternReport:
    patterns: List[Pattern] = field(default_factory=list)
    has_data: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "patterns": [p.to_dict() for p in self.patterns],
            "hasData": self.has_data,
        }


def trend_percentage(recent: float, previous: float) -> float:
    """Month-over-month change in percent, 0 when there is nothing to compare."""
    if previous <= 0:
        return 0.0
    return round((recent - previous) / previous * 100, 1)


class PatternAnalyzer:
    """Spending patterns over a trailing six-month window."""

    def __init__(self, lookback_months: int = 6) -> None:
        self.lookback_months = lookback_months

    def months_with_data(self, expenses: List[Dict[str, Any]], window_start: date, now: date) -> int:
        """
        Whole 30-day periods between the first expense in the window (or the
        window start when there are no expenses) and now, never less than one.

        Counting from the first expense rather than from the window start
        differs from the plain six-month divisor, which would always give 7;
        a single recent expense averages over one month instead.
        """
        start = window_start
        if expenses:
            start = max(window_start, min(transaction_date(tx) for tx in expenses))
        return max(1, math.ceil((now - start).days / 30))

    def analyze(self, transactions: List[Dict[str, Any]], now: Optional[date] = None) -> PatternReport:
        aggregator = TemporalAggregator(now)
        window_start = months_ago(aggregator.now, self.lookback_months)
        window = aggregator.in_window(transactions, window_start)
        if not window:
            return PatternReport()

        expenses = aggregator.expenses(window)
        total_expenses = aggregator.total(expenses)
        months = self.months_with_data(expenses, window_start, aggregator.now)
        top_category = rank_first(aggregator.category_totals(expenses))
        peak_day = rank_first(aggregator.weekday_counts(expenses))
        recent, previous = aggregator.month_over_month(window)
        trend = trend_percentage(recent, previous)

        logger.debug(
            "patterns: %d transactions, %d expenses, months=%d", len(window), len(expenses), months
        )

        patterns = [
            Pattern(
                label=TOP_CATEGORY,
                value=top_category[0] if top_category else None,
                metric=round(top_category[1], 2) if top_category else 0.0,
                trend_text="total spent in category",
            ),
            Pattern(
                label=AVG_MONTHLY,
                value=round(total_expenses / months, 2),
                metric=trend,
                trend_text=f"{trend}% vs last month",
            ),
            Pattern(
                label=PEAK_DAY,
                value=peak_day[0] if peak_day else None,
                metric=peak_day[1] if peak_day else 0,
                trend_text=f"{peak_day[1] if peak_day else 0} transactions",
            ),
            Pattern(
                label=TOTAL_EXPENSES,
                value=round(total_expenses, 2),
                metric=months,
                trend_text=f"Last {months} months",
            ),
        ]
        return PatternReport(patterns=patterns, has_data=True)
