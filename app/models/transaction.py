import datetime
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, Field, field_validator


class TransactionType(str, Enum):
    income = "income"
    expense = "expense"


class TransactionCreate(BaseModel):
    amount: float = Field(ge=0)
    type: TransactionType
    category: str = Field(min_length=1)
    date: datetime.date
    description: Optional[str] = ""


class TransactionUpdate(BaseModel):
    amount: Optional[float] = Field(default=None, ge=0)
    type: Optional[TransactionType] = None
    category: Optional[str] = Field(default=None, min_length=1)
    date: Optional[datetime.date] = None
    description: Optional[str] = None

    @field_validator("amount", "type", "category", "date", mode="before")
    @classmethod
    def reject_null(cls, value):
        # omitted fields keep their stored value; an explicit null is invalid
        if value is None:
            raise ValueError("field may be omitted but not set to null")
        return value

    @field_validator("description")
    @classmethod
    def blank_description(cls, value):
        return value or ""


class TransactionInDB(BaseModel):
    user_id: str
    transaction_id: str = ""
    amount: float
    type: TransactionType
    category: str
    date: datetime.date
    description: Optional[str] = ""

    def model_post_init(self, __context) -> None:
        # sort key: ISO date first so range queries by date work
        if not self.transaction_id:
            self.transaction_id = f"{self.date.isoformat()}#{uuid4().hex[:12]}"


class TransactionPublic(BaseModel):
    transaction_id: str
    amount: float
    type: TransactionType
    category: str
    date: datetime.date
    description: Optional[str] = ""
