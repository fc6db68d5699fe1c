import pytest

from app.utils.tax_calculator import (
    compute_tax,
    new_regime_tax,
    old_regime_tax,
    total_deductions,
)

full_deductions = {
    "section80C": 150000,
    "section80D": 50000,
    "hra": 0,
    "homeLoanInterest": 200000,
    "other": 0,
}


@pytest.mark.parametrize("income", [0, 25000, 50000])
def test_no_tax_below_standard_deduction(income):
    result = compute_tax(income, {})
    assert result.old_regime.tax == 0
    assert result.new_regime.tax == 0
    assert result.savings == 0


def test_twelve_lakh_income_without_deductions():
    result = compute_tax(1200000, {})
    assert result.total_deductions == 0
    assert result.old_regime.taxable_income == 1150000
    assert result.old_regime.tax == 163800  # (112500 + 150000 * 0.3) * 1.04
    assert result.new_regime.taxable_income == 1150000
    assert result.new_regime.tax == 85800  # (45000 + 250000 * 0.15) * 1.04
    assert result.recommended_regime == "new"
    assert result.savings == 78000


def test_deduction_caps_are_enforced():
    deductions = {
        "section80C": 500000,
        "section80D": 90000,
        "hra": 10000,
        "homeLoanInterest": 999999,
        "other": 5000,
    }
    assert total_deductions(deductions) == 150000 + 50000 + 10000 + 200000 + 5000


def test_missing_deduction_fields_count_as_zero():
    assert total_deductions({"hra": 1000}) == 1000
    assert total_deductions(None) == 0
    assert total_deductions({"section80C": None}) == 0


@pytest.mark.parametrize(
    "gross_income, expected",
    [
        (300000, 0),  # taxable 250000
        (550000, 13000),  # taxable 500000
        (1050000, 117000),  # taxable 1000000
        (1100000, 132600),  # taxable 1050000
    ],
)
def test_old_regime_slab_edges(gross_income, expected):
    assert compute_tax(gross_income, {}).old_regime.tax == expected


@pytest.mark.parametrize(
    "gross_income, expected",
    [
        (350000, 0),  # taxable 300000
        (650000, 15600),  # taxable 600000
        (950000, 46800),  # taxable 900000
        (1250000, 93600),  # taxable 1200000
        (1550000, 156000),  # taxable 1500000
        (1650000, 187200),  # taxable 1600000
    ],
)
def test_new_regime_slab_edges(gross_income, expected):
    assert compute_tax(gross_income, {}).new_regime.tax == expected


def test_new_regime_ignores_deductions():
    assert compute_tax(950000, full_deductions).new_regime.tax == compute_tax(950000, {}).new_regime.tax


def test_old_regime_recommended_with_large_deductions():
    result = compute_tax(1050000, full_deductions)
    assert result.total_deductions == 400000
    assert result.old_regime.taxable_income == 600000
    assert result.old_regime.tax == 33800
    assert result.new_regime.tax == 62400
    assert result.recommended_regime == "old"
    assert result.savings == 28600


@pytest.mark.parametrize(
    "gross_income",
    [0, 250000, 300000, 350000, 500000, 550000, 650000, 950000, 1000000, 1050000, 1250000, 1550000, 2500000],
)
@pytest.mark.parametrize("deductions", [{}, full_deductions, {"hra": 300000, "other": 100000}])
def test_recommendation_is_strict_comparison(gross_income, deductions):
    result = compute_tax(gross_income, deductions)
    old_tax = old_regime_tax(gross_income, deductions)
    new_tax = new_regime_tax(gross_income)
    assert result.recommended_regime == ("old" if old_tax < new_tax else "new")
    assert result.savings >= 0


def test_equal_taxes_recommend_new_regime():
    assert compute_tax(0, {}).recommended_regime == "new"


def test_negative_income_is_rejected():
    with pytest.raises(ValueError):
        compute_tax(-1, {})


def test_result_payload():
    payload = compute_tax(1200000, {"section80C": 100000}).to_dict()
    assert set(payload) == {
        "grossIncome", "totalDeductions", "oldRegime", "newRegime", "recommendation", "savings",
    }
    assert payload["oldRegime"]["taxableIncome"] == 1050000
    assert payload["newRegime"]["taxableIncome"] == 1150000
