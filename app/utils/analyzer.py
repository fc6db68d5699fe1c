from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Mapping, Optional

from app.utils.aggregator import TemporalAggregator, safe_percentage, transaction_date
from app.utils.forecaster import ForecastReport, Forecaster
from app.utils.patterns import PatternAnalyzer, PatternReport
from app.utils.recommendations import RecommendationEngine, RecommendationReport
from app.utils.tax_calculator import TaxResult, compute_tax


@dataclass
class CategoryInsight:
    """Represents calculated totals for a single expense category."""

    category: str
    total: float
    transaction_count: int
    share: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "total": self.total,
            "transactionCount": self.transaction_count,
            "share": self.share,
        }


class FinanceAnalyzer:
    """
    Entry point for the analysis engine shared by the API routers. Every
    method is pure: it takes the caller's transactions and an optional ``now``
    and returns a report object with a ``to_dict`` payload.
    """

    def __init__(
        self,
        savings_target: float = 20.0,
        category_share_limit: float = 40.0,
        spike_ratio: float = 1.3,
        forecast_minimum_transactions: int = 5,
        top_categories: int = 5,
    ) -> None:
        self._patterns = PatternAnalyzer()
        self._forecaster = Forecaster(minimum_transactions=forecast_minimum_transactions)
        self._recommendations = RecommendationEngine(
            savings_target=savings_target,
            category_share_limit=category_share_limit,
            spike_ratio=spike_ratio,
        )
        self._top_categories = top_categories

    def patterns(self, transactions: List[Dict[str, Any]], now: Optional[date] = None) -> PatternReport:
        return self._patterns.analyze(transactions, now)

    def predictions(self, transactions: List[Dict[str, Any]], now: Optional[date] = None) -> ForecastReport:
        return self._forecaster.predict(transactions, now)

    def recommendations(
        self, transactions: List[Dict[str, Any]], now: Optional[date] = None
    ) -> RecommendationReport:
        return self._recommendations.recommend(transactions, now)

    def tax(self, gross_income: float, deductions: Optional[Mapping[str, Any]] = None) -> TaxResult:
        return compute_tax(gross_income, deductions)

    def category_insights(self, transactions: List[Dict[str, Any]]) -> List[CategoryInsight]:
        """Expense categories ordered by total, largest first."""
        aggregator = TemporalAggregator()
        expenses = aggregator.expenses(transactions)
        total_expenses = aggregator.total(expenses)

        counts: Dict[str, int] = defaultdict(int)
        for tx in expenses:
            counts[tx["category"]] += 1

        totals = aggregator.category_totals(expenses)
        ranked = sorted(totals.items(), key=lambda item: item[1], reverse=True)
        return [
            CategoryInsight(
                category=category,
                total=round(total, 2),
                transaction_count=counts[category],
                share=round(safe_percentage(total, total_expenses), 1),
            )
            for category, total in ranked
        ]

    def dashboard(self, transactions: List[Dict[str, Any]], now: Optional[date] = None) -> Dict[str, Any]:
        """
        Balance, current-month cash flow, six-month history, top categories
        and the last seven days of spending.
        """
        aggregator = TemporalAggregator(now)
        today = aggregator.now

        this_month = [
            tx for tx in transactions
            if (transaction_date(tx).year, transaction_date(tx).month) == (today.year, today.month)
        ]
        monthly_income = aggregator.total(this_month, "income")
        monthly_expenses = aggregator.total(this_month, "expense")
        balance = aggregator.total(transactions, "income") - aggregator.total(transactions, "expense")

        return {
            "totalBalance": round(balance, 2),
            "monthlyIncome": round(monthly_income, 2),
            "monthlyExpenses": round(monthly_expenses, 2),
            "savingsRate": round(safe_percentage(monthly_income - monthly_expenses, monthly_income), 1),
            "monthlyData": [bucket.to_dict() for bucket in aggregator.monthly_buckets(transactions)],
            "expenseCategories": [
                insight.to_dict()
                for insight in self.category_insights(transactions)[: self._top_categories]
            ],
            "weeklySpending": aggregator.daily_totals(transactions),
            "hasData": bool(transactions),
        }
