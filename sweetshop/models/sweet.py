"""ORM model for sweets held in inventory."""

from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, Numeric, String

from sweetshop.models.base import Base

# Price must stay below MAX_PRICE to fit Numeric(10, 2); quantity fits a 32-bit INTEGER.
MAX_PRICE = 10**8
MAX_QUANTITY = 2**31 - 1


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Sweet(Base):
    """
    One inventory item. name is unique across all sweets and quantity never
    drops below zero (enforced by the check constraint as well as the service).
    """

    __tablename__ = "sweets"
    __table_args__ = (
        CheckConstraint("quantity >= 0", name="quantity_non_negative"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, unique=True, index=True)
    category = Column(String(255), nullable=False, index=True)
    price = Column(Numeric(10, 2), nullable=False)
    quantity = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=utcnow,
        onupdate=utcnow,
    )
