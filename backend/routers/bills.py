"""Bills router: participants, items, assignments, settings, totals and export."""

from typing import Literal, Optional

from fastapi import APIRouter, Body, HTTPException, Response
from fastapi.responses import PlainTextResponse

import schemas
from utils import bill_state
from utils.bill_store import bill_store, get_bill_or_404, update_bill_or_404
from utils.currency import list_currencies
from utils.display import render_breakdown, render_share_text
from utils.splits import summarize_bill
from utils.validation import (
    get_item_or_404,
    get_participant_or_404,
    validate_new_item,
    validate_new_participant,
)


router = APIRouter(tags=["bills"])


def _update(bill_id: str, mutate) -> schemas.BillSummary:
    return summarize_bill(update_bill_or_404(bill_id, mutate), bill_id)


@router.get("/currencies", response_model=list[schemas.CurrencyInfo])
def read_currencies():
    return list_currencies()


@router.post("/totals", response_model=schemas.BillSummary)
def calculate_bill(state: schemas.BillState):
    """Stateless calculation: totals and per-person amounts for a posted bill."""
    return summarize_bill(state)


@router.post("/bills", response_model=schemas.BillSummary, status_code=201)
def create_bill(settings: Optional[schemas.AdjustmentSettings] = Body(default=None)):
    state = schemas.BillState(settings=settings or schemas.AdjustmentSettings())
    bill_id = bill_store.create(state)
    return summarize_bill(state, bill_id)


@router.get("/bills/{bill_id}", response_model=schemas.BillSummary)
def read_bill(bill_id: str):
    return summarize_bill(get_bill_or_404(bill_id), bill_id)


@router.delete("/bills/{bill_id}", status_code=204)
def delete_bill(bill_id: str):
    if not bill_store.delete(bill_id):
        raise HTTPException(status_code=404, detail="Bill not found")
    return Response(status_code=204)


@router.put("/bills/{bill_id}/settings", response_model=schemas.BillSummary)
def update_settings(bill_id: str, settings: schemas.AdjustmentSettings):
    return _update(bill_id, lambda state: bill_state.update_settings(state, settings))


@router.post("/bills/{bill_id}/participants", response_model=schemas.BillSummary)
def add_participant(bill_id: str, participant: schemas.ParticipantCreate):
    validate_new_participant(participant)
    return _update(bill_id, lambda state: bill_state.add_participant(state, participant.name))


@router.delete("/bills/{bill_id}/participants/{participant_id}", response_model=schemas.BillSummary)
def remove_participant(bill_id: str, participant_id: int):
    def mutate(state):
        get_participant_or_404(state, participant_id)
        return bill_state.remove_participant(state, participant_id)

    return _update(bill_id, mutate)


@router.post("/bills/{bill_id}/items", response_model=schemas.BillSummary)
def add_item(bill_id: str, item: schemas.ItemCreate):
    def mutate(state):
        validate_new_item(state, item)
        return bill_state.add_item(state, item.name, item.price, item.quantity)

    return _update(bill_id, mutate)


@router.patch("/bills/{bill_id}/items/{item_id}", response_model=schemas.BillSummary)
def update_item(bill_id: str, item_id: int, update: schemas.ItemUpdate):
    def mutate(state):
        get_item_or_404(state, item_id)
        return bill_state.set_item_quantity(state, item_id, update.quantity)

    return _update(bill_id, mutate)


@router.delete("/bills/{bill_id}/items/{item_id}", response_model=schemas.BillSummary)
def remove_item(bill_id: str, item_id: int):
    def mutate(state):
        get_item_or_404(state, item_id)
        return bill_state.remove_item(state, item_id)

    return _update(bill_id, mutate)


@router.post(
    "/bills/{bill_id}/items/{item_id}/assignments/{participant_id}",
    response_model=schemas.BillSummary
)
def toggle_assignment(bill_id: str, item_id: int, participant_id: int):
    """Assign the participant to the item, or unassign them if already assigned."""
    def mutate(state):
        get_item_or_404(state, item_id)
        get_participant_or_404(state, participant_id)
        return bill_state.toggle_assignment(state, item_id, participant_id)

    return _update(bill_id, mutate)


@router.post("/bills/{bill_id}/items/{item_id}/assign-all", response_model=schemas.BillSummary)
def assign_all(bill_id: str, item_id: int):
    def mutate(state):
        get_item_or_404(state, item_id)
        return bill_state.set_all_assigned(state, item_id)

    return _update(bill_id, mutate)


@router.post("/bills/{bill_id}/scanned-items", response_model=schemas.BillSummary)
def add_scanned_items(bill_id: str, payload: schemas.ScannedItemsAdd):
    """Add reviewed scan results to the bill as unassigned items."""
    items = [
        item.model_copy(update={"name": item.name.strip()})
        for item in payload.items
        if item.name.strip() and item.price > 0
    ]
    return _update(bill_id, lambda state: bill_state.add_scanned_items(state, items))


@router.get("/bills/{bill_id}/export", response_class=PlainTextResponse)
def export_bill(bill_id: str, style: Literal["full", "share"] = "full"):
    """Plain-text breakdown ("full") or the short chat summary ("share")."""
    state = get_bill_or_404(bill_id)
    if style == "share":
        return render_share_text(state)
    return render_breakdown(state)
