from decimal import Decimal
from typing import Any, Dict, Literal
from pydantic import BaseModel, Field, field_serializer

CommandType = Literal["split", "expense", "predict", "summary", "unknown"]

class ParsedCommand(BaseModel):
    type: CommandType
    data: Dict[str, Any] = Field(default_factory=dict)

    @field_serializer("data", when_used="json")
    def serialize_data(self, data: Dict[str, Any]):
        # Parsed amounts go out as JSON numbers
        return {k: float(v) if isinstance(v, Decimal) else v for k, v in data.items()}

class CommandParseRequest(BaseModel):
    message: str

class CommandRequest(BaseModel):
    message: str
    group_id: str | None = None
    # Other side of a direct chat; unused for group chats
    recipient_id: str | None = None

class CommandResult(BaseModel):
    type: CommandType
    executed: bool
    data: Dict[str, Any] = Field(default_factory=dict)

class CategoryBreakdown(BaseModel):
    category: str
    total: Decimal
    count: int
