import json
import re
from typing import Any, Dict


# ```json ... ``` wrappers the model sometimes adds despite instructions
CODE_FENCE_OPEN = re.compile(r'^```(?:json)?\s*', re.I)
CODE_FENCE_CLOSE = re.compile(r'\s*```$')


class ScanParseError(ValueError):
    """The model's reply was not the JSON document we asked for."""


def strip_code_fences(text: str) -> str:
    text = text.strip()
    if text.startswith('```'):
        text = CODE_FENCE_OPEN.sub('', text)
        text = CODE_FENCE_CLOSE.sub('', text)
    return text.strip()


def parse_classifier_reply(text: str) -> Dict[str, Any]:
    """
    Parse the vision model's reply into {"items": [...], "warnings": [...]}.

    Items are returned raw; run them through normalize_scanned_items before
    they go anywhere near a bill.

    Raises:
        ScanParseError: If the reply is not JSON or has no "items" list
    """
    try:
        parsed = json.loads(strip_code_fences(text or ""))
    except json.JSONDecodeError as e:
        raise ScanParseError(f"Reply is not valid JSON: {e}") from e

    if not isinstance(parsed, dict) or not isinstance(parsed.get("items"), list):
        raise ScanParseError("Reply has no items list")

    warnings = parsed.get("warnings") or []
    if not isinstance(warnings, list):
        warnings = [warnings]

    return {
        "items": parsed["items"],
        "warnings": [str(w) for w in warnings if w],
    }
