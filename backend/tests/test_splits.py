import pytest
from pydantic import ValidationError

from splitledger.errors import InvalidSplit
from splitledger.services.splits import compute_split


def test_equal_split_remainder_goes_first_in_order(make_expense):
    split = compute_split(make_expense(100, participants=["A", "B", "C"]))
    assert split == {"A": 34, "B": 33, "C": 33}


def test_equal_split_ignores_participant_input_order(make_expense):
    split = compute_split(make_expense(101, participants=["C", "A", "B"]))
    assert split == {"A": 34, "B": 34, "C": 33}
    assert list(split) == ["A", "B", "C"]


def test_equal_split_always_reconciles(make_expense):
    people = ["P1", "P2", "P3", "P4", "P5", "P6", "P7"]
    for amount in (0, 1, 2, 7, 99, 100, 1001, 123457):
        for n in range(1, len(people) + 1):
            split = compute_split(make_expense(amount, participants=people[:n]))
            assert sum(split.values()) == amount
            assert max(split.values()) - min(split.values()) <= 1


def test_equal_split_ignores_custom_shares(make_expense):
    expense = make_expense(90, participants=["A", "B"], shares={"A": 80, "B": 10})
    assert compute_split(expense) == {"A": 45, "B": 45}


def test_payer_outside_participants(make_expense):
    split = compute_split(make_expense(60, paid_by="Z", participants=["A", "B"]))
    assert split == {"A": 30, "B": 30}


def test_exact_split(make_expense):
    expense = make_expense(100, participants=["A", "B"], share_type="EXACT", shares={"A": 70, "B": 30})
    assert compute_split(expense) == {"A": 70, "B": 30}


def test_exact_split_must_match_amount(make_expense):
    expense = make_expense(100, participants=["A", "B"], share_type="EXACT", shares={"A": 70, "B": 29})
    with pytest.raises(InvalidSplit, match="must equal expense amount"):
        compute_split(expense)


def test_exact_split_rejects_fractional_units(make_expense):
    expense = make_expense(100, participants=["A", "B"], share_type="EXACT", shares={"A": "70.5", "B": "29.5"})
    with pytest.raises(InvalidSplit):
        compute_split(expense)


def test_exact_split_missing_share(make_expense):
    expense = make_expense(100, participants=["A", "B"], share_type="EXACT", shares={"A": 100})
    with pytest.raises(InvalidSplit, match="Missing custom share for: B"):
        compute_split(expense)


def test_percentage_split_tie_goes_to_first_in_order(make_expense):
    expense = make_expense(99, participants=["A", "B"], share_type="PERCENTAGE", shares={"A": 50, "B": 50})
    assert compute_split(expense) == {"A": 49, "B": 50}


def test_percentage_split_thirds(make_expense):
    expense = make_expense(
        100, participants=["A", "B", "C"], share_type="PERCENTAGE",
        shares={"A": "33.33", "B": "33.33", "C": "33.34"},
    )
    split = compute_split(expense)
    assert split == {"A": 34, "B": 33, "C": 33}


def test_percentage_split_rounds_half_to_even(make_expense):
    expense = make_expense(10, participants=["A", "B"], share_type="PERCENTAGE", shares={"A": 25, "B": 75})
    # 2.5 -> 2 and 7.5 -> 8
    assert compute_split(expense) == {"A": 2, "B": 8}


def test_percentage_split_always_reconciles(make_expense):
    shares = {"A": "12.5", "B": "37.5", "C": "16.67", "D": "33.33"}
    for amount in (0, 1, 3, 17, 99, 1000, 99999):
        expense = make_expense(amount, participants=list(shares), share_type="PERCENTAGE", shares=shares)
        split = compute_split(expense)
        assert sum(split.values()) == amount
        assert all(v >= 0 for v in split.values())


def test_percentage_must_total_100(make_expense):
    expense = make_expense(100, participants=["A", "B"], share_type="PERCENTAGE", shares={"A": 50, "B": 49})
    with pytest.raises(InvalidSplit, match="must equal 100"):
        compute_split(expense)


def test_percentage_within_tolerance(make_expense):
    expense = make_expense(
        300, participants=["A", "B", "C"], share_type="PERCENTAGE",
        shares={"A": "33.33", "B": "33.33", "C": "33.33"},
    )
    assert sum(compute_split(expense).values()) == 300


def test_empty_participants(make_expense):
    with pytest.raises(InvalidSplit, match="At least one participant"):
        compute_split(make_expense(100, participants=[]))


def test_unknown_share_key_rejected_at_construction(make_expense):
    with pytest.raises(ValidationError):
        make_expense(100, participants=["A", "B"], share_type="EXACT", shares={"A": 50, "Z": 50})


def test_duplicate_participants_rejected(make_expense):
    with pytest.raises(ValidationError):
        make_expense(100, participants=["A", "A"])


def test_negative_amount_rejected(make_expense):
    with pytest.raises(ValidationError):
        make_expense(-1)
