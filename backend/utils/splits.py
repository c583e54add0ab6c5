"""Split calculation utilities for itemized bills."""

from decimal import Decimal
from typing import Optional

import schemas
from utils.currency import convert_for_bill


ZERO = Decimal("0")
HUNDRED = Decimal("100")


def line_total(item: schemas.LineItem) -> Decimal:
    return item.price * item.quantity


def calculate_subtotal(state: schemas.BillState) -> Decimal:
    return sum((line_total(item) for item in state.items), ZERO)


def _service_charge(amount: Decimal, settings: schemas.AdjustmentSettings) -> Decimal:
    if not settings.service_charge_enabled:
        return ZERO
    return amount * settings.service_charge_rate / HUNDRED


def _tax(amount: Decimal, settings: schemas.AdjustmentSettings) -> Decimal:
    if not settings.tax_enabled:
        return ZERO
    return amount * settings.tax_rate / HUNDRED


def calculate_totals(state: schemas.BillState) -> schemas.Totals:
    """
    Calculate bill-level totals, keeping every intermediate stage.

    Order of adjustments:
    1. Discount (percentage of subtotal or fixed amount, never clamped)
    2. Service charge on the discounted amount
    3. Tax on the amount after service charge
    """
    settings = state.settings
    subtotal = calculate_subtotal(state)

    if settings.discount_type == "percentage":
        discount_amount = settings.discount_value * subtotal / HUNDRED
    else:
        discount_amount = settings.discount_value

    after_discount = subtotal - discount_amount
    service_charge_amount = _service_charge(after_discount, settings)
    after_service_charge = after_discount + service_charge_amount
    tax_amount = _tax(after_service_charge, settings)

    return schemas.Totals(
        subtotal=subtotal,
        discount_amount=discount_amount,
        after_discount=after_discount,
        service_charge_amount=service_charge_amount,
        after_service_charge=after_service_charge,
        tax_amount=tax_amount,
        total=after_service_charge + tax_amount
    )


def calculate_raw_share(state: schemas.BillState, participant_id: int) -> Decimal:
    """Sum of the participant's equal shares of every item assigned to them."""
    share = ZERO
    for item in state.items:
        if participant_id in item.assigned_to:
            share += line_total(item) / len(item.assigned_to)
    return share


def calculate_person_total(state: schemas.BillState, participant_id: int) -> Decimal:
    """
    Calculate what one participant owes.

    Algorithm:
    1. Sum the participant's items (shared items split equally, no remainder handling)
    2. ratio = participant's share / bill subtotal
    3. Take ratio of the bill discount, then apply the bill's service charge
       and tax rates to the participant's running amount

    Items nobody is assigned to are not charged to anyone.
    """
    totals = calculate_totals(state)
    if totals.subtotal <= 0:
        return ZERO

    raw_share = calculate_raw_share(state, participant_id)
    ratio = raw_share / totals.subtotal

    after_discount = raw_share - totals.discount_amount * ratio
    after_service_charge = after_discount + _service_charge(after_discount, state.settings)
    return after_service_charge + _tax(after_service_charge, state.settings)


def calculate_person_totals(state: schemas.BillState) -> list[schemas.PersonTotal]:
    """Per-person totals for every participant, in the order they were added."""
    results = []
    for participant in state.participants:
        amount = calculate_person_total(state, participant.id)
        results.append(schemas.PersonTotal(
            participant_id=participant.id,
            name=participant.name,
            amount=amount,
            converted_amount=convert_for_bill(state, amount),
            item_ids=[item.id for item in state.items if participant.id in item.assigned_to]
        ))
    return results


def summarize_bill(state: schemas.BillState, bill_id: Optional[str] = None) -> schemas.BillSummary:
    totals = calculate_totals(state)
    return schemas.BillSummary(
        bill_id=bill_id,
        state=state,
        totals=totals,
        converted_total=convert_for_bill(state, totals.total),
        per_person=calculate_person_totals(state)
    )
