from decimal import Decimal
from typing import Annotated, Literal, Optional

from pydantic import BaseModel, Field, PlainSerializer, field_validator, model_validator


# Amounts are Decimal internally and plain JSON numbers on the wire
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]
AssignedSet = Annotated[set[int], PlainSerializer(sorted, return_type=list[int], when_used="json")]

# Upper bounds for user-entered amounts and quantities
MAX_AMOUNT = Decimal("1e12")
MAX_QUANTITY = 10000


class Participant(BaseModel):
    id: int
    name: str


class LineItem(BaseModel):
    id: int
    name: str
    price: Money = Field(ge=0, le=MAX_AMOUNT)  # Unit price
    quantity: int = Field(default=1, ge=1, le=MAX_QUANTITY)
    assigned_to: AssignedSet = set()


class AdjustmentSettings(BaseModel):
    discount_type: Literal["percentage", "fixed"] = "percentage"
    discount_value: Money = Field(default=Decimal("0"), ge=0, le=MAX_AMOUNT)
    service_charge_enabled: bool = False
    service_charge_rate: Money = Field(default=Decimal("10"), ge=0, le=MAX_AMOUNT)
    tax_enabled: bool = False
    tax_rate: Money = Field(default=Decimal("8"), ge=0, le=MAX_AMOUNT)
    currency: str = "MVR"
    convert_to: Optional[str] = None
    custom_rate: Optional[Money] = Field(default=None, le=MAX_AMOUNT)

    @field_validator("currency")
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        return v.strip().upper()

    @field_validator("convert_to")
    @classmethod
    def normalize_convert_to(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip().upper()
        return v or None


class BillState(BaseModel):
    participants: list[Participant] = []
    items: list[LineItem] = []
    settings: AdjustmentSettings = Field(default_factory=AdjustmentSettings)
    next_id: int = 1

    @model_validator(mode="after")
    def check_ids(self):
        participant_ids = [p.id for p in self.participants]
        item_ids = [item.id for item in self.items]
        if len(set(participant_ids)) != len(participant_ids):
            raise ValueError("Participant ids must be unique")
        if len(set(item_ids)) != len(item_ids):
            raise ValueError("Item ids must be unique")

        known = set(participant_ids)
        for item in self.items:
            unknown = item.assigned_to - known
            if unknown:
                raise ValueError(f"Item {item.id} is assigned to unknown participants: {sorted(unknown)}")

        if participant_ids or item_ids:
            if self.next_id <= max(participant_ids + item_ids):
                raise ValueError("next_id must be greater than every existing id")
        return self


class Totals(BaseModel):
    subtotal: Money
    discount_amount: Money
    after_discount: Money
    service_charge_amount: Money
    after_service_charge: Money
    tax_amount: Money
    total: Money


class PersonTotal(BaseModel):
    participant_id: int
    name: str
    amount: Money
    converted_amount: Optional[Money] = None
    item_ids: list[int] = []


# API request/response schemas
class ParticipantCreate(BaseModel):
    name: str

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return v.strip()


class ItemCreate(BaseModel):
    name: str
    price: Money = Field(ge=0, le=MAX_AMOUNT)
    quantity: int = Field(default=1, ge=1, le=MAX_QUANTITY)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return v.strip()


class ItemUpdate(BaseModel):
    quantity: int = Field(ge=1, le=MAX_QUANTITY)


class ScannedItem(BaseModel):
    name: str
    price: Money = Field(ge=0, le=MAX_AMOUNT)  # Line total as printed on the receipt
    quantity: int = Field(default=1, ge=1, le=MAX_QUANTITY)
    confidence: Literal["high", "medium", "low"] = "medium"


class ScanResult(BaseModel):
    items: list[ScannedItem]
    warnings: list[str] = []


class ScannedItemsAdd(BaseModel):
    items: list[ScannedItem]


class AccessCheck(BaseModel):
    code: str


class CurrencyInfo(BaseModel):
    code: str
    symbol: str
    name: str
    rate: Money


class BillSummary(BaseModel):
    bill_id: Optional[str] = None
    state: BillState
    totals: Totals
    converted_total: Optional[Money] = None
    per_person: list[PersonTotal]
