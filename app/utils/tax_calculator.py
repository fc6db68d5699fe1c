"""
Income tax estimate under the two simplified regimes.

The old regime allows capped deductions; the new regime ignores them and uses
a wider slab schedule. Both take a flat standard deduction and add a 4% cess.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

from app.utils.aggregator import round_half_up

STANDARD_DEDUCTION = 50000.0
CESS_RATE = 0.04

DEDUCTION_CAPS: Dict[str, Optional[float]] = {
    "section80C": 150000.0,
    "section80D": 50000.0,
    "hra": None,
    "homeLoanInterest": 200000.0,
    "other": None,
}

# (threshold, rate, tax accumulated below threshold)
OLD_REGIME_SLABS: List[Tuple[float, float, float]] = [
    (250000.0, 0.05, 0.0),
    (500000.0, 0.20, 12500.0),
    (1000000.0, 0.30, 112500.0),
]

NEW_REGIME_SLABS: List[Tuple[float, float, float]] = [
    (300000.0, 0.05, 0.0),
    (600000.0, 0.10, 15000.0),
    (900000.0, 0.15, 45000.0),
    (1200000.0, 0.20, 90000.0),
    (1500000.0, 0.30, 150000.0),
]


@dataclass
class RegimeResult:
    tax: int
    taxable_income: float

    def to_dict(self) -> Dict[str, Any]:
        return {"tax": self.tax, "taxableIncome": self.taxable_income}


@dataclass
class TaxResult:
    gross_income: float
    total_deductions: float
    old_regime: RegimeResult
    new_regime: RegimeResult
    recommended_regime: str
    savings: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "grossIncome": self.gross_income,
            "totalDeductions": self.total_deductions,
            "oldRegime": self.old_regime.to_dict(),
            "newRegime": self.new_regime.to_dict(),
            "recommendation": self.recommended_regime,
            "savings": self.savings,
        }


def total_deductions(deductions: Optional[Mapping[str, Any]]) -> float:
    """Sum of deductions with each capped field clipped to its ceiling."""
    deductions = deductions or {}
    total = 0.0
    for field, cap in DEDUCTION_CAPS.items():
        amount = float(deductions.get(field) or 0)
        total += amount if cap is None else min(amount, cap)
    return total


def _slab_tax(taxable_income: float, slabs: List[Tuple[float, float, float]]) -> float:
    tax = 0.0
    for threshold, rate, base in slabs:
        if taxable_income > threshold:
            tax = base + (taxable_income - threshold) * rate
    return tax


def old_regime_taxable_income(gross_income: float, deductions: Optional[Mapping[str, Any]]) -> float:
    return max(gross_income - total_deductions(deductions) - STANDARD_DEDUCTION, 0.0)


def new_regime_taxable_income(gross_income: float) -> float:
    return max(gross_income - STANDARD_DEDUCTION, 0.0)


def old_regime_tax(gross_income: float, deductions: Optional[Mapping[str, Any]]) -> float:
    taxable = old_regime_taxable_income(gross_income, deductions)
    return _slab_tax(taxable, OLD_REGIME_SLABS) * (1 + CESS_RATE)


def new_regime_tax(gross_income: float) -> float:
    taxable = new_regime_taxable_income(gross_income)
    return _slab_tax(taxable, NEW_REGIME_SLABS) * (1 + CESS_RATE)


def compute_tax(gross_income: float, deductions: Optional[Mapping[str, Any]] = None) -> TaxResult:
    """
    Compare both regimes for one income. Raises ValueError for negative
    income; missing deduction fields count as zero.
    """
    gross_income = float(gross_income)
    if gross_income < 0:
        raise ValueError("grossIncome must be non-negative")

    old_tax = old_regime_tax(gross_income, deductions)
    new_tax = new_regime_tax(gross_income)

    return TaxResult(
        gross_income=gross_income,
        total_deductions=total_deductions(deductions),
        old_regime=RegimeResult(
            tax=round_half_up(old_tax),
            taxable_income=old_regime_taxable_income(gross_income, deductions),
        ),
        new_regime=RegimeResult(
            tax=round_half_up(new_tax),
            taxable_income=new_regime_taxable_income(gross_income),
        ),
        recommended_regime="old" if old_tax < new_tax else "new",
        savings=abs(round_half_up(old_tax - new_tax)),
    )
