from datetime import date

from app.utils.recommendations import RecommendationEngine

now = date(2025, 11, 15)


def _tx(amount, kind, category, day):
    return {"amount": amount, "type": kind, "category": category, "date": day}


def _titles(report):
    return [r.title for r in report.recommendations]


def test_empty_window_has_no_data():
    report = RecommendationEngine().recommend([], now)
    assert report.has_data is False
    assert report.to_dict() == {"recommendations": [], "hasData": False}


def test_transactions_older_than_three_months_are_ignored():
    transactions = [_tx(500.0, "expense", "Food", "2025-07-01")]
    assert RecommendationEngine().recommend(transactions, now).has_data is False


def test_income_only_month_is_great_savings():
    report = RecommendationEngine().recommend([_tx(100000.0, "income", "Salary", "2025-11-01")], now)
    assert report.has_data is True
    assert _titles(report) == ["Great Savings!", "Track Regularly"]
    assert report.recommendations[0].kind == "tip"
    assert "100.0%" in report.recommendations[0].description
    assert all(r.kind != "alert" for r in report.recommendations)


def test_low_savings_rate_alert():
    transactions = [
        _tx(1000.0, "income", "Salary", "2025-11-01"),
        _tx(300.0, "expense", "Food", "2025-11-02"),
        _tx(300.0, "expense", "Rent", "2025-11-03"),
        _tx(300.0, "expense", "Travel", "2025-11-04"),
    ]
    report = RecommendationEngine().recommend(transactions, now)
    assert _titles(report) == ["Low Savings Rate", "Track Regularly"]
    assert report.recommendations[0].kind == "alert"
    assert report.recommendations[0].severity == "warning"
    assert "10.0%" in report.recommendations[0].description


def test_savings_rate_at_target_is_a_tip():
    transactions = [
        _tx(1000.0, "income", "Salary", "2025-11-01"),
        _tx(400.0, "expense", "Food", "2025-11-02"),
        _tx(400.0, "expense", "Rent", "2025-11-03"),
    ]
    report = RecommendationEngine().recommend(transactions, now)
    assert _titles(report) == ["Great Savings!", "High Food Spending"]


def test_dominant_category_alert():
    transactions = [
        _tx(700.0, "expense", "Shopping", "2025-11-02"),
        _tx(300.0, "expense", "Food", "2025-11-03"),
    ]
    report = RecommendationEngine().recommend(transactions, now)
    assert _titles(report) == ["High Shopping Spending", "Track Regularly"]
    assert report.recommendations[0].severity == "danger"
    assert "70%" in report.recommendations[0].description


def test_spending_spike_alert():
    transactions = [
        _tx(100.0, "expense", "Food", "2025-10-01"),
        _tx(200.0, "expense", "Rent", "2025-11-01"),
    ]
    report = RecommendationEngine().recommend(transactions, now)
    assert _titles(report) == ["High Rent Spending", "Spending Spike Detected"]
    assert "100%" in report.recommendations[1].description


def test_no_spike_at_exactly_the_ratio():
    transactions = [
        _tx(100.0, "expense", "Food", "2025-10-01"),
        _tx(130.0, "expense", "Rent", "2025-11-01"),
    ]
    report = RecommendationEngine().recommend(transactions, now)
    assert "Spending Spike Detected" not in _titles(report)


def test_always_at_least_one_recommendation():
    transactions = [_tx(10.0, "expense", "Food", "2025-11-01")]
    report = RecommendationEngine().recommend(transactions, now)
    assert len(report.recommendations) >= 1
    assert _titles(report)[-1] == "Track Regularly"


def test_thresholds_are_configurable():
    transactions = [
        _tx(1000.0, "income", "Salary", "2025-11-01"),
        _tx(700.0, "expense", "Food", "2025-11-02"),
        _tx(100.0, "expense", "Rent", "2025-11-03"),
    ]
    engine = RecommendationEngine(savings_target=10.0, category_share_limit=90.0)
    assert _titles(engine.recommend(transactions, now)) == ["Great Savings!", "Track Regularly"]


def test_income_from_several_deposits_counts_towards_savings():
    transactions = [
        _tx(600.0, "income", "Salary", "2025-10-20"),
        _tx(400.0, "income", "Freelance", "2025-11-05"),
        _tx(850.0, "expense", "Rent", "2025-11-06"),
        _tx(50.0, "expense", "Food", "2025-11-07"),
    ]
    report = RecommendationEngine().recommend(transactions, now)
    assert report.recommendations[0].title == "Low Savings Rate"
    assert "10.0%" in report.recommendations[0].description
