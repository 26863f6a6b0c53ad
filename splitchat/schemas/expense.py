from datetime import datetime
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field

class ExpenseCreate(BaseModel):
    description: str = Field(..., min_length=1, max_length=200)
    amount: Decimal = Field(..., gt=0)
    category: str = "Other"
    group_id: str | None = None

class ExpenseOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: str
    group_id: str | None = None
    amount: Decimal
    description: str | None = None
    category: str
    split_bill_id: int | None = None
    created_at: datetime | None = None
