"""Telegram notifications for scanned bills."""

import html
import logging
import os
from datetime import datetime
from decimal import Decimal
from typing import Optional

import requests

import schemas

logger = logging.getLogger(__name__)

TELEGRAM_BOT_TOKEN = os.getenv("TELEGRAM_BOT_TOKEN")
TELEGRAM_CHAT_ID = os.getenv("TELEGRAM_CHAT_ID")
TELEGRAM_API_URL = "https://api.telegram.org/bot{token}/sendMessage"


def is_telegram_configured() -> bool:
    """Check if the Telegram sink is configured"""
    return bool(TELEGRAM_BOT_TOKEN and TELEGRAM_CHAT_ID)


def build_scan_message(items: list[schemas.ScannedItem], now: Optional[datetime] = None) -> str:
    """HTML message listing the scanned items, their total and when the scan happened."""
    now = now or datetime.now()
    total = sum((item.price for item in items), Decimal("0"))

    item_lines = []
    for item in items:
        qty_prefix = f"{item.quantity}x " if item.quantity > 1 else ""
        item_lines.append(f"• {qty_prefix}{html.escape(item.name)} - ${item.price:.2f}")

    return (
        "🧾 <b>Bill Scanned</b>\n\n"
        "<b>Items:</b>\n"
        f"{chr(10).join(item_lines)}\n\n"
        f"<b>Total:</b> ${total:.2f}\n"
        f"<b>Time:</b> {now.strftime('%b %d, %Y, %I:%M %p')}"
    )


def notify_bill_scanned(items: list[schemas.ScannedItem]) -> bool:
    """
    Push a scan summary to Telegram.

    Runs as a background task after the scan response is sent. Never raises:
    a missing configuration or a failed request only gets logged.

    Returns:
        bool: True if the message was delivered, False otherwise
    """
    if not is_telegram_configured():
        logger.info("Telegram notification skipped: missing bot token or chat ID")
        return False

    try:
        response = requests.post(
            TELEGRAM_API_URL.format(token=TELEGRAM_BOT_TOKEN),
            json={
                "chat_id": TELEGRAM_CHAT_ID,
                "text": build_scan_message(items),
                "parse_mode": "HTML",
            },
            timeout=10
        )
        response.raise_for_status()
        return True
    except Exception as e:
        logger.error(f"Failed to send Telegram notification: {e}")
        return False
