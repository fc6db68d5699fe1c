from __future__ import annotations

import calendar
import math
from collections import defaultdict
from dataclasses import dataclass, asdict
from datetime import date, datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional, Tuple

MONTH_LABELS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]
WEEKDAY_LABELS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

INCOME = "income"
EXPENSE = "expense"


@dataclass
class MonthlyBucket:
    """Income and expense totals for a single calendar month."""

    year: int
    month: int
    label: str
    income: float = 0.0
    expense: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["income"] = round(self.income, 2)
        data["expense"] = round(self.expense, 2)
        return data


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up, like Math.round."""
    return int(math.floor(value + 0.5))


def safe_percentage(numerator: float, denominator: float) -> float:
    if not denominator:
        return 0.0
    return numerator / denominator * 100


def shift_month(year: int, month: int, delta: int) -> Tuple[int, int]:
    """Move (year, month) by delta months; month is 1-based."""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1


def months_ago(now: date, months: int) -> date:
    """
    Naive calendar-month subtraction. The day of month is kept and clamped to
    the last day of the target month (Mar 31 minus one month is Feb 28/29).
    """
    year, month = shift_month(now.year, now.month, -months)
    day = min(now.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def days_ago(now: date, days: int) -> date:
    return now - timedelta(days=days)


def transaction_date(tx: Dict[str, Any]) -> date:
    value = tx["date"]
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    # ISO strings from storage may carry a time component
    return date.fromisoformat(str(value)[:10])


def rank_first(totals: Dict[str, float]) -> Optional[Tuple[str, float]]:
    """
    Highest entry by value. Ties go to the key inserted first, which follows
    the order transactions were supplied in.
    """
    if not totals:
        return None
    key = max(totals, key=lambda k: totals[k])
    return key, totals[key]


class TemporalAggregator:
    """
    Buckets a read-only transaction list into lookback windows ending at
    ``now``. Transactions are dicts with ``amount``, ``type``, ``category``
    and ``date`` keys; they are never modified.
    """

    def __init__(self, now: Optional[date] = None) -> None:
        if isinstance(now, datetime):
            now = now.date()
        self.now = now or date.today()

    def in_window(
        self,
        transactions: Iterable[Dict[str, Any]],
        start: date,
        end: Optional[date] = None,
    ) -> List[Dict[str, Any]]:
        selected = []
        for tx in transactions:
            tx_date = transaction_date(tx)
            if tx_date < start:
                continue
            if end is not None and tx_date >= end:
                continue
            selected.append(tx)
        return selected

    def trailing_months(self, transactions: Iterable[Dict[str, Any]], months: int) -> List[Dict[str, Any]]:
        return self.in_window(transactions, months_ago(self.now, months))

    def trailing_days(self, transactions: Iterable[Dict[str, Any]], days: int) -> List[Dict[str, Any]]:
        return self.in_window(transactions, days_ago(self.now, days))

    @staticmethod
    def expenses(transactions: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return [tx for tx in transactions if tx.get("type") == EXPENSE]

    @staticmethod
    def incomes(transactions: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return [tx for tx in transactions if tx.get("type") == INCOME]

    @staticmethod
    def total(transactions: Iterable[Dict[str, Any]], kind: Optional[str] = None) -> float:
        return sum(
            float(tx.get("amount", 0))
            for tx in transactions
            if kind is None or tx.get("type") == kind
        )

    def category_totals(self, transactions: Iterable[Dict[str, Any]]) -> Dict[str, float]:
        totals: Dict[str, float] = defaultdict(float)
        for tx in self.expenses(transactions):
            totals[tx["category"]] += float(tx.get("amount", 0))
        return dict(totals)

    def weekday_counts(self, transactions: Iterable[Dict[str, Any]]) -> Dict[str, int]:
        counts: Dict[str, int] = defaultdict(int)
        for tx in self.expenses(transactions):
            counts[WEEKDAY_LABELS[transaction_date(tx).weekday()]] += 1
        return dict(counts)

    def monthly_buckets(self, transactions: Iterable[Dict[str, Any]], months: int = 6) -> List[MonthlyBucket]:
        """
        Exactly ``months`` buckets ending with the current month, oldest
        first. Months without transactions stay at zero. Buckets are keyed by
        (year, month) so a window crossing New Year never merges two Januaries.
        """
        buckets: Dict[Tuple[int, int], MonthlyBucket] = {}
        for offset in range(months - 1, -1, -1):
            year, month = shift_month(self.now.year, self.now.month, -offset)
            buckets[(year, month)] = MonthlyBucket(year=year, month=month, label=MONTH_LABELS[month - 1])

        for tx in transactions:
            tx_date = transaction_date(tx)
            bucket = buckets.get((tx_date.year, tx_date.month))
            if bucket is None:
                continue
            if tx.get("type") == INCOME:
                bucket.income += float(tx.get("amount", 0))
            elif tx.get("type") == EXPENSE:
                bucket.expense += float(tx.get("amount", 0))
        return list(buckets.values())

    def monthly_expense_totals(self, transactions: Iterable[Dict[str, Any]]) -> Dict[Tuple[int, int], float]:
        """Expense totals for months that actually have expense transactions."""
        totals: Dict[Tuple[int, int], float] = defaultdict(float)
        for tx in self.expenses(transactions):
            tx_date = transaction_date(tx)
            totals[(tx_date.year, tx_date.month)] += float(tx.get("amount", 0))
        return dict(totals)

    def month_over_month(self, transactions: Iterable[Dict[str, Any]]) -> Tuple[float, float]:
        """Expense totals for the trailing month and the month before it."""
        expenses = self.expenses(transactions)
        one_month_ago = months_ago(self.now, 1)
        recent = self.in_window(expenses, one_month_ago)
        previous = self.in_window(expenses, months_ago(self.now, 2), one_month_ago)
        return self.total(recent), self.total(previous)

    def daily_totals(self, transactions: Iterable[Dict[str, Any]], days: int = 7) -> List[Dict[str, Any]]:
        totals: Dict[date, float] = {}
        for offset in range(days - 1, -1, -1):
            totals[days_ago(self.now, offset)] = 0.0

        for tx in self.expenses(self.trailing_days(transactions, days - 1)):
            tx_date = transaction_date(tx)
            if tx_date in totals:
                totals[tx_date] += float(tx.get("amount", 0))

        return [
            {
                "date": day.isoformat(),
                "day": WEEKDAY_LABELS[day.weekday()],
                "amount": round(amount, 2),
            }
            for day, amount in totals.items()
        ]
