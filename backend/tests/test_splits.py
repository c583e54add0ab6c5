"""Tests for bill totals and per-person apportionment."""

import itertools
import random
from decimal import Decimal

import pytest

import schemas
from conftest import make_state
from utils.splits import (
    calculate_person_total,
    calculate_person_totals,
    calculate_raw_share,
    calculate_totals,
    summarize_bill,
)


def test_pizza_scenario_totals(pizza_bill):
    totals = calculate_totals(pizza_bill)

    assert totals.subtotal == Decimal("20.00")
    assert totals.discount_amount == Decimal("2.00")
    assert totals.after_discount == Decimal("18.00")
    assert totals.service_charge_amount == Decimal("1.80")
    assert totals.after_service_charge == Decimal("19.80")
    assert totals.tax_amount == Decimal("1.584")
    assert totals.total == Decimal("21.384")


def test_pizza_scenario_shared_equally(pizza_bill):
    assert calculate_person_total(pizza_bill, 1) == Decimal("10.692")
    assert calculate_person_total(pizza_bill, 2) == Decimal("10.692")


def test_pizza_assigned_only_to_alice(pizza_bill):
    pizza = pizza_bill.items[0].model_copy(update={"assigned_to": {1}})
    state = pizza_bill.model_copy(update={"items": [pizza]})

    assert calculate_person_total(state, 1) == Decimal("21.384")
    assert calculate_person_total(state, 2) == 0


def test_shared_and_individual_items_without_adjustments():
    state = make_state(items=[
        ("Pizza", "20", 1, ["Alice", "Bob"]),
        ("Soda", "5", 1, ["Bob"]),
    ])

    totals = calculate_totals(state)
    alice = calculate_person_total(state, 1)
    bob = calculate_person_total(state, 2)

    assert totals.subtotal == Decimal("25")
    assert alice == Decimal("10")
    assert bob == Decimal("15")
    assert alice + bob == totals.total


def test_quantity_multiplies_line_total():
    state = make_state(items=[("Beer", "6.50", 3, ["Alice"])])

    assert calculate_totals(state).subtotal == Decimal("19.50")
    assert calculate_raw_share(state, 1) == Decimal("19.50")


def test_fixed_discount():
    state = make_state(
        items=[("Steak", "30", 1, ["Alice"]), ("Salad", "10", 1, ["Bob"])],
        discount_type="fixed",
        discount_value=Decimal("4")
    )

    totals = calculate_totals(state)
    assert totals.discount_amount == Decimal("4")
    assert totals.after_discount == Decimal("36")
    # Alice carries 3/4 of the discount
    assert calculate_person_total(state, 1) == Decimal("27")
    assert calculate_person_total(state, 2) == Decimal("9")


def test_disabled_adjustments_contribute_nothing():
    state = make_state(
        items=[("Pasta", "12", 1, ["Alice"])],
        service_charge_enabled=False,
        service_charge_rate=Decimal("15"),
        tax_enabled=False,
        tax_rate=Decimal("20")
    )

    totals = calculate_totals(state)
    assert totals.service_charge_amount == 0
    assert totals.tax_amount == 0
    assert totals.total == Decimal("12")


def test_over_discount_is_not_clamped():
    state = make_state(
        items=[("Coffee", "5", 1, ["Alice"])],
        discount_type="fixed",
        discount_value=Decimal("8")
    )

    totals = calculate_totals(state)
    assert totals.after_discount == Decimal("-3")
    assert totals.total == Decimal("-3")
    assert calculate_person_total(state, 1) == Decimal("-3")


def test_percentage_discount_over_100_is_allowed():
    state = make_state(
        items=[("Coffee", "10", 1, ["Alice"])],
        discount_value=Decimal("150")
    )

    assert calculate_totals(state).after_discount == Decimal("-5")


def test_unassigned_item_counts_toward_subtotal_only():
    state = make_state(items=[
        ("Pizza", "20", 1, ["Alice"]),
        ("Mystery", "10", 1, []),
    ])

    totals = calculate_totals(state)
    alice = calculate_person_total(state, 1)
    bob = calculate_person_total(state, 2)

    assert totals.total == Decimal("30")
    assert alice == Decimal("20")
    assert bob == 0
    assert alice + bob < totals.total


def test_zero_subtotal_gives_zero_person_totals():
    state = make_state(items=[("Water", "0", 1, ["Alice", "Bob"])], tax_enabled=True)

    assert calculate_totals(state).total == 0
    assert calculate_person_total(state, 1) == 0


def test_empty_bill():
    state = schemas.BillState()

    totals = calculate_totals(state)
    assert totals.subtotal == 0
    assert totals.total == 0
    assert calculate_person_totals(state) == []


def test_unknown_participant_owes_nothing(pizza_bill):
    assert calculate_person_total(pizza_bill, 999) == 0


def test_three_way_split_has_no_cent_reconciliation():
    state = make_state(
        people=("A", "B", "C"),
        items=[("Platter", "10", 1, ["A", "B", "C"])]
    )

    shares = [calculate_person_total(state, pid) for pid in (1, 2, 3)]
    assert shares[0] == shares[1] == shares[2]
    assert abs(sum(shares) - Decimal("10")) < Decimal("1e-20")


@pytest.mark.parametrize(
    "service_enabled,tax_enabled,discount_type",
    list(itertools.product([False, True], [False, True], ["percentage", "fixed"]))
)
def test_person_totals_reconcile_with_bill_total(service_enabled, tax_enabled, discount_type):
    rng = random.Random(42)
    people = ("Ann", "Ben", "Cat", "Dan", "Eve")
    items = []
    for n in range(12):
        assigned = rng.sample(people, rng.randint(1, len(people)))
        price = Decimal(rng.randint(50, 5000)) / 100
        items.append((f"Item {n}", str(price), rng.randint(1, 4), assigned))

    state = make_state(
        people=people,
        items=items,
        discount_type=discount_type,
        discount_value=Decimal("7.5"),
        service_charge_enabled=service_enabled,
        service_charge_rate=Decimal("10"),
        tax_enabled=tax_enabled,
        tax_rate=Decimal("6")
    )

    total = calculate_totals(state).total
    per_person = sum(p.amount for p in calculate_person_totals(state))
    assert abs(per_person - total) <= Decimal("1e-6") * len(people)


def test_totals_ignore_item_and_participant_order():
    state = make_state(
        people=("Ann", "Ben", "Cat"),
        items=[
            ("Soup", "7.25", 1, ["Ann"]),
            ("Fish", "22.10", 2, ["Ben", "Cat"]),
            ("Cake", "9.99", 1, ["Ann", "Ben", "Cat"]),
        ],
        discount_value=Decimal("5"),
        service_charge_enabled=True,
        tax_enabled=True
    )
    reordered = state.model_copy(update={
        "items": list(reversed(state.items)),
        "participants": list(reversed(state.participants))
    })

    assert calculate_totals(state) == calculate_totals(reordered)
    for participant in state.participants:
        assert calculate_person_total(state, participant.id) == calculate_person_total(reordered, participant.id)


def test_calculation_is_idempotent(pizza_bill):
    assert calculate_totals(pizza_bill) == calculate_totals(pizza_bill)
    assert calculate_person_totals(pizza_bill) == calculate_person_totals(pizza_bill)


def test_person_totals_include_conversion_and_items(pizza_bill):
    state = pizza_bill.model_copy(update={
        "settings": pizza_bill.settings.model_copy(update={"convert_to": "EUR"})
    })

    results = calculate_person_totals(state)
    assert [r.name for r in results] == ["Alice", "Bob"]
    assert results[0].item_ids == [3]
    assert results[0].converted_amount == Decimal("10.692") * Decimal("0.92")


def test_summarize_bill(pizza_bill):
    summary = summarize_bill(pizza_bill, "abc")

    assert summary.bill_id == "abc"
    assert summary.totals.total == Decimal("21.384")
    assert summary.converted_total is None
    assert len(summary.per_person) == 2
