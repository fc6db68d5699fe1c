from datetime import date

from app.utils.patterns import PatternAnalyzer, trend_percentage

now = date(2025, 11, 15)


def _by_label(report):
    return {p.label: p for p in report.patterns}


def test_no_transactions_means_no_data():
    report = PatternAnalyzer().analyze([], now)
    assert report.has_data is False
    assert report.patterns == []
    assert report.to_dict() == {"patterns": [], "hasData": False}


def test_transactions_outside_window_are_ignored():
    old = [{"amount": 500.0, "type": "expense", "category": "Food", "date": "2024-01-10"}]
    assert PatternAnalyzer().analyze(old, now).has_data is False


def test_single_food_expense():
    transactions = [{"amount": 1000.0, "type": "expense", "category": "Food", "date": "2025-11-10"}]
    report = PatternAnalyzer().analyze(transactions, now)
    patterns = _by_label(report)

    assert report.has_data is True
    assert [p.label for p in report.patterns] == ["Top Category", "Avg Monthly", "Peak Day", "Total Expenses"]
    assert patterns["Top Category"].value == "Food"
    assert patterns["Top Category"].metric == 1000.0
    assert patterns["Peak Day"].value == "Monday"
    assert patterns["Peak Day"].metric == 1
    assert patterns["Avg Monthly"].value == 1000.0
    assert patterns["Avg Monthly"].metric == 0.0
    assert patterns["Total Expenses"].value == 1000.0
    assert patterns["Total Expenses"].metric == 1


def test_average_uses_months_since_first_expense():
    transactions = [
        {"amount": 200.0, "type": "expense", "category": "Rent", "date": "2025-07-01"},
        {"amount": 300.0, "type": "expense", "category": "Rent", "date": "2025-09-01"},
    ]
    patterns = _by_label(PatternAnalyzer().analyze(transactions, now))
    # 137 days since 2025-07-01 -> 5 thirty-day periods
    assert patterns["Total Expenses"].metric == 5
    assert patterns["Avg Monthly"].value == 100.0


def test_trend_against_previous_month():
    transactions = [
        {"amount": 100.0, "type": "expense", "category": "Food", "date": "2025-10-01"},
        {"amount": 150.0, "type": "expense", "category": "Food", "date": "2025-11-01"},
    ]
    patterns = _by_label(PatternAnalyzer().analyze(transactions, now))
    assert patterns["Avg Monthly"].metric == 50.0
    assert patterns["Avg Monthly"].trend_text == "50.0% vs last month"


def test_trend_is_zero_without_previous_spending():
    assert trend_percentage(500.0, 0.0) == 0.0
    assert trend_percentage(50.0, 100.0) == -50.0


def test_peak_day_counts_transactions_not_amounts():
    transactions = [
        {"amount": 5000.0, "type": "expense", "category": "Rent", "date": "2025-11-12"},  # Wednesday
        {"amount": 10.0, "type": "expense", "category": "Food", "date": "2025-11-10"},  # Monday
        {"amount": 10.0, "type": "expense", "category": "Food", "date": "2025-11-03"},  # Monday
    ]
    patterns = _by_label(PatternAnalyzer().analyze(transactions, now))
    assert patterns["Peak Day"].value == "Monday"
    assert patterns["Peak Day"].metric == 2
    assert patterns["Top Category"].value == "Rent"


def test_ties_go_to_first_category_seen():
    transactions = [
        {"amount": 100.0, "type": "expense", "category": "Travel", "date": "2025-11-02"},
        {"amount": 100.0, "type": "expense", "category": "Food", "date": "2025-11-03"},
    ]
    patterns = _by_label(PatternAnalyzer().analyze(transactions, now))
    assert patterns["Top Category"].value == "Travel"


def test_income_only_window_has_empty_expense_patterns():
    transactions = [{"amount": 4000.0, "type": "income", "category": "Salary", "date": "2025-11-01"}]
    report = PatternAnalyzer().analyze(transactions, now)
    patterns = _by_label(report)
    assert report.has_data is True
    assert patterns["Top Category"].value is None
    assert patterns["Peak Day"].value is None
    assert patterns["Total Expenses"].value == 0


def test_pattern_payload_uses_camel_case():
    transactions = [{"amount": 1000.0, "type": "expense", "category": "Food", "date": "2025-11-10"}]
    payload = PatternAnalyzer().analyze(transactions, now).to_dict()
    assert payload["hasData"] is True
    assert set(payload["patterns"][0]) == {"label", "value", "metric", "trendText"}
    assert payload["patterns"][2]["trendText"] == "1 transactions"
