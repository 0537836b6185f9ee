"""Pydantic schemas for sweet inventory requests and responses."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from sweetshop.models.sweet import MAX_PRICE, MAX_QUANTITY


def _reject_bool(v: Any) -> Any:
    # bool is an int subclass; a JSON true must not become quantity 1.
    if isinstance(v, bool):
        raise ValueError("Quantity must be an integer")
    return v


def _required_text(v: str, label: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError(f"{label} is required")
    return v


def _check_price(v: float) -> float:
    # Numeric(10, 2) keeps two decimals; round first so the bound holds after storage.
    v = round(v, 2)
    if v < 0:
        raise ValueError("Price must be a non-negative number")
    if v >= MAX_PRICE:
        raise ValueError(f"Price must be less than {MAX_PRICE}")
    return v


def _check_quantity(v: int, minimum: int, message: str) -> int:
    if v < minimum:
        raise ValueError(message)
    if v > MAX_QUANTITY:
        raise ValueError(f"Quantity must be at most {MAX_QUANTITY}")
    return v


class SweetCreate(BaseModel):
    """Body for POST /sweets."""

    name: str = Field(..., max_length=255)
    category: str = Field(..., max_length=255)
    price: float = Field(..., allow_inf_nan=False, description="Unit price, non-negative")
    quantity: int = Field(..., description="Units in stock, non-negative")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _required_text(v, "Name")

    @field_validator("category")
    @classmethod
    def validate_category(cls, v: str) -> str:
        return _required_text(v, "Category")

    @field_validator("price")
    @classmethod
    def validate_price(cls, v: float) -> float:
        return _check_price(v)

    @field_validator("quantity", mode="before")
    @classmethod
    def reject_bool_quantity(cls, v: Any) -> Any:
        return _reject_bool(v)

    @field_validator("quantity")
    @classmethod
    def validate_quantity(cls, v: int) -> int:
        return _check_quantity(v, 0, "Quantity must be a non-negative integer")


class SweetUpdate(BaseModel):
    """Body for PUT /sweets/{id}. Only supplied (non-null) fields are applied."""

    name: str | None = Field(default=None, max_length=255)
    category: str | None = Field(default=None, max_length=255)
    price: float | None = Field(default=None, allow_inf_nan=False)
    quantity: int | None = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str | None) -> str | None:
        return None if v is None else _required_text(v, "Name")

    @field_validator("category")
    @classmethod
    def validate_category(cls, v: str | None) -> str | None:
        return None if v is None else _required_text(v, "Category")

    @field_validator("price")
    @classmethod
    def validate_price(cls, v: float | None) -> float | None:
        return None if v is None else _check_price(v)

    @field_validator("quantity", mode="before")
    @classmethod
    def reject_bool_quantity(cls, v: Any) -> Any:
        return _reject_bool(v)

    @field_validator("quantity")
    @classmethod
    def validate_quantity(cls, v: int | None) -> int | None:
        return None if v is None else _check_quantity(v, 0, "Quantity must be a non-negative integer")

    def changes(self) -> dict[str, Any]:
        """Fields the caller actually supplied."""
        return self.model_dump(exclude_unset=True, exclude_none=True)


class RestockRequest(BaseModel):
    """Body for POST /sweets/{id}/restock."""

    quantity: int = Field(..., description="Units to add, at least 1")

    @field_validator("quantity", mode="before")
    @classmethod
    def reject_bool_quantity(cls, v: Any) -> Any:
        return _reject_bool(v)

    @field_validator("quantity")
    @classmethod
    def validate_quantity(cls, v: int) -> int:
        return _check_quantity(v, 1, "Quantity must be a positive integer")


class SweetSearch(BaseModel):
    """Optional filters for GET /sweets/search; all supplied filters must match."""

    name: str | None = None
    category: str | None = None
    min_price: float | None = Field(default=None, ge=0, allow_inf_nan=False)
    max_price: float | None = Field(default=None, ge=0, allow_inf_nan=False)

    @field_validator("name", "category")
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        if v is None:
            return None
        v = v.strip()
        return v or None


class SweetOut(BaseModel):
    """Sweet as returned by the API (camelCase timestamps)."""

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    id: int
    name: str
    category: str
    price: float
    quantity: int
    created_at: datetime
    updated_at: datetime
