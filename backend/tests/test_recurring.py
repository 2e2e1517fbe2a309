from datetime import date

import pytest
from pydantic import ValidationError

from splitledger.schemas import RecurringRuleCreate
from splitledger.services.recurring import materialize, occurrences


def _rule(**overrides):
    fields = {
        "amount": 1200,
        "description": "Rent",
        "paid_by": "A",
        "participants": ["A", "B"],
        "category": "rent",
        "frequency": "MONTHLY",
        "start_date": date(2024, 1, 31),
    }
    fields.update(overrides)
    return RecurringRuleCreate(**fields)


def test_monthly_clamps_to_month_end_without_drift():
    dates = list(occurrences(_rule(), until=date(2024, 4, 30)))
    assert dates == [date(2024, 1, 31), date(2024, 2, 29), date(2024, 3, 31), date(2024, 4, 30)]


def test_end_date_bounds_occurrences():
    rule = _rule(frequency="WEEKLY", start_date=date(2024, 1, 1), end_date=date(2024, 1, 20))
    assert list(occurrences(rule, until=date(2024, 12, 31))) == [
        date(2024, 1, 1), date(2024, 1, 8), date(2024, 1, 15),
    ]


def test_daily_and_yearly():
    daily = _rule(frequency="DAILY", start_date=date(2024, 2, 27))
    assert list(occurrences(daily, until=date(2024, 3, 1))) == [
        date(2024, 2, 27), date(2024, 2, 28), date(2024, 2, 29), date(2024, 3, 1),
    ]
    yearly = _rule(frequency="YEARLY", start_date=date(2024, 2, 29))
    assert list(occurrences(yearly, until=date(2028, 3, 1))) == [
        date(2024, 2, 29), date(2025, 2, 28), date(2026, 2, 28), date(2027, 2, 28), date(2028, 2, 29),
    ]


def test_occurrences_after_skips_materialized_dates():
    dates = list(occurrences(_rule(), until=date(2024, 4, 30), after=date(2024, 2, 29)))
    assert dates == [date(2024, 3, 31), date(2024, 4, 30)]


def test_nothing_before_start():
    assert list(occurrences(_rule(), until=date(2023, 12, 31))) == []


def test_materialize_produces_plain_expenses():
    rule = _rule(share_type="EXACT", custom_shares=[{"person": "A", "value": 700}, {"person": "B", "value": 500}])
    created = materialize(rule, until=date(2024, 2, 29))
    assert [e.date for e in created] == [date(2024, 1, 31), date(2024, 2, 29)]
    first = created[0]
    assert (first.amount, first.paid_by, first.participants, first.category) == (1200, "A", ("A", "B"), "rent")
    assert [(s.person, int(s.value)) for s in first.custom_shares] == [("A", 700), ("B", 500)]


def test_rule_end_before_start_rejected():
    with pytest.raises(ValidationError):
        _rule(end_date=date(2023, 1, 1))


def test_materialize_endpoint_is_idempotent(client):
    res = client.post("/api/recurring", json={
        "amount": 900, "description": "Internet", "paid_by": "B", "participants": ["A", "B", "C"],
        "category": "utilities", "frequency": "MONTHLY", "start_date": "2024-01-15",
    })
    assert res.status_code == 200
    assert res.json()["last_materialized"] is None

    res = client.post("/api/recurring/materialize?until=2024-03-20")
    assert res.status_code == 200
    assert [e["date"] for e in res.json()["created"]] == ["2024-01-15", "2024-02-15", "2024-03-15"]

    res = client.post("/api/recurring/materialize?until=2024-03-20")
    assert res.json()["created"] == []

    res = client.get("/api/recurring")
    assert res.json()[0]["last_materialized"] == "2024-03-15"

    res = client.get("/api/balances")
    assert res.json()["B"]["net"] == 1800


def test_recurring_rule_with_bad_split_rejected(client):
    res = client.post("/api/recurring", json={
        "amount": 900, "paid_by": "B", "participants": ["A", "B"], "share_type": "PERCENTAGE",
        "custom_shares": [{"person": "A", "value": 40}, {"person": "B", "value": 40}],
        "start_date": "2024-01-15",
    })
    assert res.status_code == 400
    assert res.json()["error"] == "InvalidSplit"
