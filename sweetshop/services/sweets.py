"""Inventory operations on sweets: CRUD, search, purchase and restock.

Uniqueness of sweet names is checked before writing, but the unique index is
what actually guarantees it; a unique-index failure at commit is reported as
a ConflictError and any other constraint failure as a DomainError. Purchase
and restock change quantity with a single UPDATE so concurrent requests cannot
lose each other's writes.
"""

import logging

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from sweetshop.core.errors import ConflictError, DomainError, NotFoundError, ValidationError
from sweetshop.models.sweet import MAX_QUANTITY, Sweet, utcnow
from sweetshop.schemas.sweets import SweetCreate, SweetSearch, SweetUpdate

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Sweet not found"
DUPLICATE_NAME_MESSAGE = "Sweet with this name already exists"
OUT_OF_STOCK_MESSAGE = "Sweet is out of stock"
NO_FIELDS_MESSAGE = "No fields to update"
RESTOCK_QUANTITY_MESSAGE = "Quantity must be a positive integer"
STOCK_LIMIT_MESSAGE = f"Restock would exceed the maximum stock of {MAX_QUANTITY}"
REJECTED_MESSAGE = "Sweet data was rejected by the store"

# SQLSTATE for unique_violation (PostgreSQL); SQLite reports it in the message.
UNIQUE_VIOLATION_SQLSTATE = "23505"


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _is_unique_violation(exc: IntegrityError) -> bool:
    orig = exc.orig
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if code is not None:
        return code == UNIQUE_VIOLATION_SQLSTATE
    return "UNIQUE constraint failed" in str(orig)


def _commit_or_conflict(db: Session) -> None:
    """Commit; a unique-index failure is a name conflict, any other constraint a DomainError."""
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        if _is_unique_violation(e):
            raise ConflictError(DUPLICATE_NAME_MESSAGE) from e
        logger.warning("Constraint violation on sweets: %s", e.orig)
        raise DomainError(REJECTED_MESSAGE) from e


def _name_taken(db: Session, name: str, exclude_id: int | None = None) -> bool:
    query = db.query(Sweet.id).filter(Sweet.name == name)
    if exclude_id is not None:
        query = query.filter(Sweet.id != exclude_id)
    return query.first() is not None


def create_sweet(db: Session, body: SweetCreate) -> Sweet:
    """Add a new sweet. Raises ConflictError if the name is already used."""
    if _name_taken(db, body.name):
        raise ConflictError(DUPLICATE_NAME_MESSAGE)

    sweet = Sweet(
        name=body.name,
        category=body.category,
        price=body.price,
        quantity=body.quantity,
    )
    db.add(sweet)
    _commit_or_conflict(db)
    db.refresh(sweet)
    logger.info("Created sweet id=%s name=%s", sweet.id, sweet.name)
    return sweet


def list_sweets(db: Session) -> list[Sweet]:
    return db.query(Sweet).order_by(Sweet.name.asc()).all()


def search_sweets(db: Session, filters: SweetSearch) -> list[Sweet]:
    """
    Return sweets matching every supplied filter, ordered by name.

    name is a case-insensitive substring match, category an exact match, and
    min_price/max_price are inclusive bounds.
    """
    query = db.query(Sweet)
    if filters.name:
        query = query.filter(Sweet.name.ilike(f"%{_escape_like(filters.name)}%", escape="\\"))
    if filters.category:
        query = query.filter(Sweet.category == filters.category)
    if filters.min_price is not None:
        query = query.filter(Sweet.price >= filters.min_price)
    if filters.max_price is not None:
        query = query.filter(Sweet.price <= filters.max_price)
    return query.order_by(Sweet.name.asc()).all()


def get_sweet(db: Session, sweet_id: int) -> Sweet:
    sweet = db.query(Sweet).filter(Sweet.id == sweet_id).first()
    if sweet is None:
        raise NotFoundError(NOT_FOUND_MESSAGE)
    return sweet


def update_sweet(db: Session, sweet_id: int, body: SweetUpdate) -> Sweet:
    """
    Apply the supplied fields to a sweet and refresh updated_at.

    Raises NotFoundError for an unknown id, ValidationError when nothing was
    supplied, and ConflictError when the new name belongs to another sweet.
    """
    sweet = get_sweet(db, sweet_id)
    changes = body.changes()
    if not changes:
        raise ValidationError(NO_FIELDS_MESSAGE)

    if "name" in changes and _name_taken(db, changes["name"], exclude_id=sweet_id):
        raise ConflictError(DUPLICATE_NAME_MESSAGE)

    for field, value in changes.items():
        setattr(sweet, field, value)
    sweet.updated_at = utcnow()
    _commit_or_conflict(db)
    db.refresh(sweet)
    logger.info("Updated sweet id=%s fields=%s", sweet.id, sorted(changes))
    return sweet


def delete_sweet(db: Session, sweet_id: int) -> None:
    sweet = get_sweet(db, sweet_id)
    db.delete(sweet)
    db.commit()
    logger.info("Deleted sweet id=%s", sweet_id)


def purchase_sweet(db: Session, sweet_id: int) -> Sweet:
    """
    Sell one unit. The decrement only applies while quantity > 0, so two
    concurrent purchases of the last unit cannot both succeed.
    """
    result = db.execute(
        update(Sweet)
        .where(Sweet.id == sweet_id, Sweet.quantity > 0)
        .values(quantity=Sweet.quantity - 1, updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        db.rollback()
        # Distinguish an unknown id from an empty shelf.
        get_sweet(db, sweet_id)
        raise DomainError(OUT_OF_STOCK_MESSAGE)
    db.commit()
    sweet = get_sweet(db, sweet_id)
    logger.info("Purchased sweet id=%s remaining=%s", sweet_id, sweet.quantity)
    return sweet


def restock_sweet(db: Session, sweet_id: int, quantity: int) -> Sweet:
    """
    Add quantity units to a sweet's stock. quantity must be a positive integer,
    and the new total must still fit the quantity column.
    """
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise ValidationError(RESTOCK_QUANTITY_MESSAGE)
    if quantity > MAX_QUANTITY:
        raise ValidationError(STOCK_LIMIT_MESSAGE)

    result = db.execute(
        update(Sweet)
        .where(Sweet.id == sweet_id, Sweet.quantity <= MAX_QUANTITY - quantity)
        .values(quantity=Sweet.quantity + quantity, updated_at=utcnow())
        .execution_options(synchronize_session=False)
    )
    if result.rowcount == 0:
        db.rollback()
        get_sweet(db, sweet_id)
        raise DomainError(STOCK_LIMIT_MESSAGE)
    db.commit()
    sweet = get_sweet(db, sweet_id)
    logger.info("Restocked sweet id=%s by %s to %s", sweet_id, quantity, sweet.quantity)
    return sweet
