"""Turn the vision model's raw item list into validated ScannedItems."""

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Optional

import schemas

logger = logging.getLogger(__name__)

CONFIDENCE_LEVELS = {"high", "medium", "low"}


def _to_decimal(value: Any) -> Optional[Decimal]:
    """Numbers and numeric strings become finite Decimals; anything else is None."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float, Decimal)):
        text = str(value)
    elif isinstance(value, str):
        text = value.strip()
    else:
        return None

    try:
        number = Decimal(text)
    except InvalidOperation:
        return None
    return number if number.is_finite() else None


def coerce_quantity(value: Any) -> int:
    """Positive whole quantity, capped at MAX_QUANTITY before any int conversion."""
    number = _to_decimal(value)
    if number is None or number < 1:
        return 1
    if number > schemas.MAX_QUANTITY:
        return schemas.MAX_QUANTITY
    return int(number)


def coerce_confidence(value: Any) -> str:
    if isinstance(value, str) and value.strip().lower() in CONFIDENCE_LEVELS:
        return value.strip().lower()
    return "medium"


def normalize_scanned_items(raw_items: Iterable[Any]) -> list[schemas.ScannedItem]:
    """
    Validate raw model output.

    Drops entries without a non-empty name or without a numeric price
    between 0 and MAX_AMOUNT. Quantity defaults to 1, confidence to "medium".
    """
    items = []
    for raw in raw_items:
        if not isinstance(raw, dict):
            continue

        name = raw.get("name")
        name = str(name).strip() if name is not None else ""
        price = _to_decimal(raw.get("price"))
        if not name or price is None or price < 0 or price > schemas.MAX_AMOUNT:
            logger.debug("Dropping scanned entry: %r", raw)
            continue

        items.append(schemas.ScannedItem(
            name=name,
            price=price,
            quantity=coerce_quantity(raw.get("quantity")),
            confidence=coerce_confidence(raw.get("confidence"))
        ))

    return items
