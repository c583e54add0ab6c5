"""Validation helpers that turn unknown ids and invalid edits into HTTP errors."""

from fastapi import HTTPException

import schemas
from utils.bill_state import find_item, find_participant


def get_item_or_404(state: schemas.BillState, item_id: int) -> schemas.LineItem:
    """Get an item by ID or raise 404 if not found."""
    item = find_item(state, item_id)
    if item is None:
        raise HTTPException(status_code=404, detail="Item not found")
    return item


def get_participant_or_404(state: schemas.BillState, participant_id: int) -> schemas.Participant:
    """Get a participant by ID or raise 404 if not found."""
    participant = find_participant(state, participant_id)
    if participant is None:
        raise HTTPException(status_code=404, detail="Participant not found")
    return participant


def validate_new_participant(participant: schemas.ParticipantCreate) -> None:
    if not participant.name:
        raise HTTPException(status_code=400, detail="Participant name cannot be empty")


def validate_new_item(state: schemas.BillState, item: schemas.ItemCreate) -> None:
    """Reject items the bill model would silently ignore."""
    if not item.name:
        raise HTTPException(status_code=400, detail="Item name cannot be empty")
    if not state.participants:
        raise HTTPException(status_code=400, detail="Add at least one person before adding items")
