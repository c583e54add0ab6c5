import pytest
from decimal import Decimal
from io import BytesIO
from fastapi.testclient import TestClient
from PIL import Image

from main import app
import schemas
from utils.bill_store import bill_store

# Import rate limiters to override them
from utils.rate_limiter import scan_rate_limiter, access_rate_limiter


ACCESS_CODE = "let-me-scan"


@pytest.fixture(scope="function")
def client():
    """Create a FastAPI TestClient with an empty bill store."""
    bill_store.bills.clear()
    with TestClient(app) as c:
        yield c
    bill_store.bills.clear()


@pytest.fixture(autouse=True)
def disable_rate_limits():
    """Disable all rate limits during testing using dependency overrides."""
    async def mock_rate_limit():
        return True

    overrides = {
        scan_rate_limiter: mock_rate_limit,
        access_rate_limiter: mock_rate_limit,
    }

    for limiter, mock in overrides.items():
        app.dependency_overrides[limiter] = mock

    yield

    for limiter in overrides.keys():
        app.dependency_overrides.pop(limiter, None)


@pytest.fixture
def access_code(monkeypatch):
    """Configure the shared scan access code."""
    monkeypatch.setenv("SCAN_ACCESS_CODE", ACCESS_CODE)
    return ACCESS_CODE


@pytest.fixture
def access_headers(access_code):
    return {"X-Access-Code": access_code}


def make_image_bytes(fmt: str = "PNG") -> bytes:
    """A real 1x1 image in the requested Pillow format."""
    buffer = BytesIO()
    Image.new("RGB", (1, 1), color=(255, 0, 0)).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def receipt_png():
    return make_image_bytes("PNG")


def make_state(
    people=("Alice", "Bob"),
    items=(),
    **settings
) -> schemas.BillState:
    """
    Build a BillState directly.

    items: (name, price, quantity, [participant names]) tuples
    """
    participants = [schemas.Participant(id=i + 1, name=name) for i, name in enumerate(people)]
    ids_by_name = {p.name: p.id for p in participants}
    next_id = len(participants) + 1

    line_items = []
    for name, price, quantity, assigned in items:
        line_items.append(schemas.LineItem(
            id=next_id,
            name=name,
            price=Decimal(str(price)),
            quantity=quantity,
            assigned_to={ids_by_name[n] for n in assigned}
        ))
        next_id += 1

    return schemas.BillState(
        participants=participants,
        items=line_items,
        settings=schemas.AdjustmentSettings(**settings),
        next_id=next_id
    )


@pytest.fixture
def pizza_bill():
    """Alice and Bob share a 20.00 pizza; 10% discount, 10% service, 8% tax, USD."""
    return make_state(
        items=[("Pizza", "20.00", 1, ["Alice", "Bob"])],
        discount_type="percentage",
        discount_value=Decimal("10"),
        service_charge_enabled=True,
        service_charge_rate=Decimal("10"),
        tax_enabled=True,
        tax_rate=Decimal("8"),
        currency="USD"
    )
