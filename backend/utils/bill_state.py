"""
Pure update functions for BillState.

Every function takes a BillState and returns a new one; the input is never
modified. Invalid edits (blank names, unknown ids) return the state unchanged,
so callers that need to report an error must check before calling.
"""

from decimal import Decimal
from typing import Iterable, Optional

import schemas


def _with_items(state: schemas.BillState, items: list[schemas.LineItem]) -> schemas.BillState:
    return state.model_copy(update={"items": items})


def _replace_item(state: schemas.BillState, item_id: int, **changes) -> schemas.BillState:
    items = [
        item.model_copy(update=changes) if item.id == item_id else item
        for item in state.items
    ]
    return _with_items(state, items)


def find_item(state: schemas.BillState, item_id: int) -> Optional[schemas.LineItem]:
    return next((item for item in state.items if item.id == item_id), None)


def find_participant(state: schemas.BillState, participant_id: int) -> Optional[schemas.Participant]:
    return next((p for p in state.participants if p.id == participant_id), None)


def add_participant(state: schemas.BillState, name: str) -> schemas.BillState:
    name = (name or "").strip()
    if not name:
        return state

    participant = schemas.Participant(id=state.next_id, name=name)
    return state.model_copy(update={
        "participants": [*state.participants, participant],
        "next_id": state.next_id + 1
    })


def remove_participant(state: schemas.BillState, participant_id: int) -> schemas.BillState:
    """Remove a participant and strip them from every item's assignments."""
    participants = [p for p in state.participants if p.id != participant_id]
    items = [
        item.model_copy(update={"assigned_to": item.assigned_to - {participant_id}})
        for item in state.items
    ]
    return state.model_copy(update={"participants": participants, "items": items})


def add_item(
    state: schemas.BillState,
    name: str,
    price: Optional[Decimal],
    quantity: int = 1
) -> schemas.BillState:
    """Add an unassigned item. Needs a name, a price and at least one participant."""
    name = (name or "").strip()
    if not name or price is None or not state.participants:
        return state

    item = schemas.LineItem(
        id=state.next_id,
        name=name,
        price=price,
        quantity=max(1, int(quantity or 1))
    )
    return state.model_copy(update={
        "items": [*state.items, item],
        "next_id": state.next_id + 1
    })


def add_scanned_items(state: schemas.BillState, scanned: Iterable[schemas.ScannedItem]) -> schemas.BillState:
    """
    Append scanned receipt lines as unassigned items.

    Scanned prices are line totals, so the stored unit price is
    price / quantity.
    """
    items = list(state.items)
    next_id = state.next_id
    for entry in scanned:
        items.append(schemas.LineItem(
            id=next_id,
            name=entry.name,
            price=entry.price / entry.quantity,
            quantity=entry.quantity
        ))
        next_id += 1
    return state.model_copy(update={"items": items, "next_id": next_id})


def remove_item(state: schemas.BillState, item_id: int) -> schemas.BillState:
    return _with_items(state, [item for item in state.items if item.id != item_id])


def set_item_quantity(state: schemas.BillState, item_id: int, quantity: int) -> schemas.BillState:
    return _replace_item(state, item_id, quantity=max(1, quantity))


def toggle_assignment(state: schemas.BillState, item_id: int, participant_id: int) -> schemas.BillState:
    if find_participant(state, participant_id) is None:
        return state

    item = find_item(state, item_id)
    if item is None:
        return state

    return _replace_item(state, item_id, assigned_to=item.assigned_to ^ {participant_id})


def set_all_assigned(state: schemas.BillState, item_id: int) -> schemas.BillState:
    """Assign everyone to the item, or clear it if everyone is already assigned."""
    item = find_item(state, item_id)
    if item is None:
        return state

    everyone = {p.id for p in state.participants}
    if everyone <= item.assigned_to:
        assigned = set()
    else:
        assigned = everyone
    return _replace_item(state, item_id, assigned_to=assigned)


def update_settings(state: schemas.BillState, settings: schemas.AdjustmentSettings) -> schemas.BillState:
    return state.model_copy(update={"settings": settings})
