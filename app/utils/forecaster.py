from __future__ import annotations

import logging
import statistics
from dataclasses import dataclass, asdict, field
from datetime import date
from typing import Any, Dict, List, Optional

from app.utils.aggregator import MONTH_LABELS, TemporalAggregator, round_half_up, shift_month

logger = logging.getLogger(__name__)


@dataclass
class Prediction:
    month: str
    year: int
    actual: Optional[float] = None
    predicted: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class ForecastReport:
    predictions: List[Prediction] = field(default_factory=list)
    has_data: bool = False
    average: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "predictions": [p.to_dict() for p in self.predictions],
            "hasData": self.has_data,
        }


class Forecaster:
    """
    Flat-average expense forecast: the mean of the monthly expense totals seen
    in the lookback window, projected onto the next few months.
    """

    def __init__(
        self,
        lookback_months: int = 6,
        minimum_transactions: int = 5,
        trailing_months: int = 3,
        future_months: int = 3,
    ) -> None:
        self.lookback_months = lookback_months
        self.minimum_transactions = minimum_transactions
        self.trailing_months = trailing_months
        self.future_months = future_months

    def predict(self, transactions: List[Dict[str, Any]], now: Optional[date] = None) -> ForecastReport:
        aggregator = TemporalAggregator(now)
        expenses = aggregator.expenses(aggregator.trailing_months(transactions, self.lookback_months))
        if len(expenses) < self.minimum_transactions:
            return ForecastReport()

        # only months that actually have expenses count towards the average
        monthly = aggregator.monthly_expense_totals(expenses)
        average = statistics.fmean(monthly.values())
        logger.debug("forecast: %d months averaged to %.2f", len(monthly), average)

        current = (aggregator.now.year, aggregator.now.month)
        predictions: List[Prediction] = []
        for offset in range(-self.trailing_months, 1):
            year, month = shift_month(current[0], current[1], offset)
            actual = monthly.get((year, month))
            predictions.append(
                Prediction(
                    month=MONTH_LABELS[month - 1],
                    year=year,
                    actual=round(actual, 2) if actual else None,
                )
            )

        predicted = round_half_up(average)
        for offset in range(1, self.future_months + 1):
            year, month = shift_month(current[0], current[1], offset)
            predictions.append(Prediction(month=MONTH_LABELS[month - 1], year=year, predicted=predicted))

        return ForecastReport(predictions=predictions, has_data=True, average=average)
