"""Shared dependencies for the scan access gate."""

import os
import secrets
from typing import Annotated, Optional

from fastapi import Header, HTTPException, status


def get_scan_access_code() -> Optional[str]:
    """The shared access code, read per request so it can be rotated without a restart."""
    return os.getenv("SCAN_ACCESS_CODE") or None


def check_access_code(code: Optional[str]) -> bool:
    """
    Compare a submitted code with SCAN_ACCESS_CODE.

    Raises:
        HTTPException: 500 if no access code is configured on the server
    """
    valid_code = get_scan_access_code()
    if valid_code is None:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Access code not configured"
        )
    if code is None:
        return False
    return secrets.compare_digest(code.strip().encode("utf-8"), valid_code.encode("utf-8"))


async def require_scan_access(
    x_access_code: Annotated[Optional[str], Header()] = None
):
    """Only let requests carrying the shared access code reach the scanner."""
    if not check_access_code(x_access_code):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid access code. Please try again."
        )
    return True
