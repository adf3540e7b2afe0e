from __future__ import annotations

import json
from typing import Any, List, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class CartLine(BaseModel):
    """One line of the customer's cart as sent by the ordering screen."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: Optional[int] = Field(default=None, validation_alias=AliasChoices("id", "menuItemId", "menu_item_id"))
    name: str = ""
    category: Optional[str] = None
    price: Union[str, float, int]
    quantity: int = Field(validation_alias=AliasChoices("quantity", "qty"))


class OrderCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    table_number: int = Field(alias="tableNumber")
    customer_name: str = Field(alias="customerName")
    items: List[CartLine]
    total: Optional[Union[str, float, int]] = None
    timestamp: Optional[str] = Field(default=None, max_length=32)
    date: Optional[str] = Field(default=None, max_length=32)

    @field_validator("items", mode="before")
    @classmethod
    def _decode_items(cls, value: Any) -> Any:
        # Older clients send the cart JSON-encoded as a string.
        if isinstance(value, str):
            try:
                value = json.loads(value)
            except ValueError as exc:
                raise ValueError("items must be a JSON array") from exc
        if not isinstance(value, list):
            raise ValueError("items must be a list")
        return value

    def cart(self) -> list[dict]:
        return [line.model_dump() for line in self.items]


class StatusUpdate(BaseModel):
    status: Optional[str] = None
