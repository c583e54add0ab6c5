"""
Plain-text renderings of a bill: the downloadable breakdown and the short
summary shared to chats. Both are pure functions of BillState.
"""
from decimal import Decimal

import schemas
from utils.currency import convert_for_bill, format_currency
from utils.splits import calculate_totals, calculate_person_total, line_total


def format_rate(rate: Decimal) -> str:
    """Render a percentage rate without trailing zeros, e.g. 10 or 8.5."""
    return f"{rate.normalize():f}"


def get_assigned_names(state: schemas.BillState, item: schemas.LineItem) -> list[str]:
    """Names of the item's assignees, in the order participants were added."""
    names = [p.name for p in state.participants if p.id in item.assigned_to]
    known = {p.id for p in state.participants}
    names.extend("Unknown" for pid in sorted(item.assigned_to) if pid not in known)
    return names


def _item_label(item: schemas.LineItem) -> str:
    qty_prefix = f"{item.quantity}x " if item.quantity > 1 else ""
    return f"{qty_prefix}{item.name}"


def render_breakdown(state: schemas.BillState) -> str:
    """Full breakdown: items, every adjustment stage, totals and per-person amounts."""
    settings = state.settings
    currency = settings.currency
    totals = calculate_totals(state)

    lines = ["Bill Breakdown", "================", "", "Items:"]
    for item in state.items:
        line = f"{_item_label(item)} - {format_currency(line_total(item), currency)}"
        names = get_assigned_names(state, item)
        if names:
            line += f" ({', '.join(names)})"
        lines.append(line)

    lines.append("")
    lines.append(f"Subtotal: {format_currency(totals.subtotal, currency)}")
    if totals.discount_amount > 0:
        lines.append(f"Discount: -{format_currency(totals.discount_amount, currency)}")
        lines.append(f"After Discount: {format_currency(totals.after_discount, currency)}")
    if settings.service_charge_enabled and totals.service_charge_amount > 0:
        lines.append(
            f"Service Charge ({format_rate(settings.service_charge_rate)}%): "
            f"{format_currency(totals.service_charge_amount, currency)}"
        )
        lines.append(f"After Service Charge: {format_currency(totals.after_service_charge, currency)}")
    if settings.tax_enabled:
        lines.append(f"GST ({format_rate(settings.tax_rate)}%): {format_currency(totals.tax_amount, currency)}")
    lines.append(f"Total: {format_currency(totals.total, currency)}")

    converted_total = convert_for_bill(state, totals.total)
    if converted_total is not None:
        lines.append(f"Total in {settings.convert_to}: {format_currency(converted_total, settings.convert_to)}")

    lines.append("")
    lines.append("Per Person:")
    for participant in state.participants:
        amount = calculate_person_total(state, participant.id)
        line = f"{participant.name}: {format_currency(amount, currency)}"
        converted = convert_for_bill(state, amount)
        if converted is not None:
            line += f" ({format_currency(converted, settings.convert_to)})"
        lines.append(line)

    return "\n".join(lines) + "\n"


def render_share_text(state: schemas.BillState) -> str:
    """Compact summary for pasting into a chat."""
    currency = state.settings.currency
    totals = calculate_totals(state)

    text = "🧾 Bill Breakdown\n\n"
    text += "📋 Items:\n"
    for item in state.items:
        text += f"• {_item_label(item)} - {format_currency(line_total(item), currency)}\n"

    text += f"\n💰 Total: {format_currency(totals.total, currency)}\n"

    text += "\n👥 Per Person:\n"
    for participant in state.participants:
        amount = calculate_person_total(state, participant.id)
        text += f"• {participant.name}: {format_currency(amount, currency)}\n"

    return text
