"""
Transaction input model for recurring transaction detection.

The detection core only ever reads these records. They are supplied by the
caller, already fetched for a single bank account.
"""

from datetime import date, datetime, time
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing_extensions import Self

BLANK_DESCRIPTION_ERROR_MESSAGE = "Either originalName or originalMerchantName must be non-empty"


class Transaction(BaseModel):
    """
    A single bank transaction as seen by the detection pipeline.

    Amounts are signed integers in minor currency units (cents): debits are
    negative, credits positive. Dates may be naive, in which case they are
    interpreted in the detection session's timezone.
    """
    transaction_id: int = Field(alias="id", ge=0)
    original_name: str = Field(default="", alias="originalName")
    original_merchant_name: Optional[str] = Field(default=None, alias="originalMerchantName")
    date: datetime
    amount: int

    model_config = ConfigDict(
        populate_by_name=True,
        frozen=True,
    )

    @field_validator('date', mode='before')
    @classmethod
    def promote_calendar_date(cls, v: Any) -> Any:
        # A bare calendar date is treated as midnight on that day
        if isinstance(v, date) and not isinstance(v, datetime):
            return datetime.combine(v, time.min)
        return v

    @model_validator(mode='after')
    def check_description(self) -> Self:
        if not self.original_name.strip() and not (self.original_merchant_name or "").strip():
            raise ValueError(BLANK_DESCRIPTION_ERROR_MESSAGE)
        return self

    @property
    def display_name(self) -> str:
        """Merchant name when the bank provided one, otherwise the raw description."""
        if self.original_merchant_name and self.original_merchant_name.strip():
            return self.original_merchant_name
        return self.original_name

    @property
    def description(self) -> str:
        """Text used to build the transaction's term vector."""
        parts = [self.original_merchant_name or "", self.original_name]
        return " ".join(part for part in parts if part.strip())

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the camelCase field names callers persist with."""
        data = self.model_dump(by_alias=True, exclude_none=True)
        data['date'] = self.date.isoformat()
        return data
