from datetime import datetime
from decimal import Decimal
from typing import List, Literal
from pydantic import BaseModel, ConfigDict, Field, computed_field

SplitType = Literal["equal", "custom", "percentage", "itemized"]

class ParticipantIn(BaseModel):
    user_id: str | None = None
    amount: Decimal | None = None

class SplitBillCreate(BaseModel):
    # No field constraints: split_engine.validate_create reports each rule by kind
    description: str | None = None
    total_amount: Decimal | None = None
    participants: List[ParticipantIn] | None = None
    split_type: SplitType = "equal"
    category: str = "Other"
    group_id: str | None = None
    currency: str | None = None
    notes: str | None = Field(None, max_length=500)

class Participant(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    amount: Decimal
    is_paid: bool = False
    is_rejected: bool = False
    paid_at: datetime | None = None
    rejected_at: datetime | None = None

class SplitBill(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int | None = None
    description: str
    total_amount: Decimal
    created_by: str
    group_id: str | None = None
    participants: List[Participant]
    split_type: SplitType = "equal"
    category: str = "Other"
    currency: str = "INR"
    notes: str | None = None
    created_at: datetime | None = None
    settled_at: datetime | None = None

    @computed_field
    @property
    def is_settled(self) -> bool:
        return all(p.is_paid for p in self.participants if not p.is_rejected)

    @computed_field
    @property
    def is_cancelled(self) -> bool:
        others = [p for p in self.participants if p.user_id != self.created_by]
        return bool(others) and all(p.is_rejected for p in others)

class SplitBillList(BaseModel):
    total: int
    split_bills: List[SplitBill]

class CategoryTotal(BaseModel):
    category: str
    amount: Decimal
    count: int

class StatsOverview(BaseModel):
    total_amount: Decimal
    count: int
    settled: int
    pending: int

class RecentSplitBill(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    description: str
    total_amount: Decimal
    category: str
    is_settled: bool
    created_at: datetime | None = None

class SplitBillStats(BaseModel):
    overview: StatsOverview
    by_category: List[CategoryTotal]
    recent_activity: List[RecentSplitBill]
