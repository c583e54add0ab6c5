"""In-memory bill sessions. Bills live only as long as the process and their TTL."""

import os
import threading
import uuid
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from fastapi import HTTPException

import schemas


BILL_TTL_SECONDS = int(os.getenv("BILL_TTL_SECONDS", "86400"))


class BillStore:
    def __init__(self, ttl_seconds: int = BILL_TTL_SECONDS):
        self.bills = {}
        self.ttl_seconds = ttl_seconds
        # Sync route handlers run in a threadpool; every read-modify-write holds this
        self._lock = threading.RLock()

    def _expiry(self) -> datetime:
        return datetime.now(timezone.utc) + timedelta(seconds=self.ttl_seconds)

    def create(self, state: Optional[schemas.BillState] = None) -> str:
        """Store a new bill and return its id."""
        with self._lock:
            self.cleanup_expired()
            bill_id = str(uuid.uuid4())
            self.bills[bill_id] = {
                "state": state or schemas.BillState(),
                "expires_at": self._expiry()
            }
            return bill_id

    def get(self, bill_id: str) -> Optional[schemas.BillState]:
        """Retrieve a bill if it has not expired. Reading refreshes the TTL."""
        with self._lock:
            entry = self.bills.get(bill_id)
            if entry is None:
                return None

            if datetime.now(timezone.utc) > entry["expires_at"]:
                del self.bills[bill_id]
                return None

            entry["expires_at"] = self._expiry()
            return entry["state"]

    def save(self, bill_id: str, state: schemas.BillState):
        with self._lock:
            self.bills[bill_id] = {"state": state, "expires_at": self._expiry()}

    def update(
        self,
        bill_id: str,
        mutate: Callable[[schemas.BillState], schemas.BillState]
    ) -> Optional[schemas.BillState]:
        """
        Apply mutate to the current state and store the result atomically.

        Returns None if the bill does not exist. Exceptions raised by mutate
        propagate and leave the stored state untouched.
        """
        with self._lock:
            state = self.get(bill_id)
            if state is None:
                return None

            new_state = mutate(state)
            self.save(bill_id, new_state)
            return new_state

    def delete(self, bill_id: str) -> bool:
        with self._lock:
            return self.bills.pop(bill_id, None) is not None

    def cleanup_expired(self):
        """Remove expired bills."""
        with self._lock:
            now = datetime.now(timezone.utc)
            expired_ids = [
                bill_id for bill_id, entry in self.bills.items()
                if now > entry["expires_at"]
            ]
            for bill_id in expired_ids:
                del self.bills[bill_id]


# Global store instance
bill_store = BillStore()


def get_bill_or_404(bill_id: str) -> schemas.BillState:
    """Get a bill by ID or raise 404 if not found."""
    state = bill_store.get(bill_id)
    if state is None:
        raise HTTPException(status_code=404, detail="Bill not found")
    return state


def update_bill_or_404(
    bill_id: str,
    mutate: Callable[[schemas.BillState], schemas.BillState]
) -> schemas.BillState:
    """Atomically update a bill by ID or raise 404 if not found."""
    state = bill_store.update(bill_id, mutate)
    if state is None:
        raise HTTPException(status_code=404, detail="Bill not found")
    return state
