"""Sweet inventory routes. Every route requires a valid token; delete and restock require admin."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response, status

from sweetshop.api.auth import get_current_user, require_admin
from sweetshop.api.deps import DbSession
from sweetshop.schemas.auth import CurrentUser
from sweetshop.schemas.sweets import (
    RestockRequest,
    SweetCreate,
    SweetOut,
    SweetSearch,
    SweetUpdate,
)
from sweetshop.services import sweets as sweet_service

router = APIRouter(dependencies=[Depends(get_current_user)])

AdminUser = Annotated[CurrentUser, Depends(require_admin)]


@router.post("", response_model=SweetOut, status_code=status.HTTP_201_CREATED)
def create_sweet(body: SweetCreate, db: DbSession) -> SweetOut:
    return sweet_service.create_sweet(db, body)


@router.get("", response_model=list[SweetOut])
def list_sweets(db: DbSession) -> list[SweetOut]:
    """All sweets ordered by name."""
    return sweet_service.list_sweets(db)


@router.get("/search", response_model=list[SweetOut])
def search_sweets(
    db: DbSession,
    name: Annotated[str | None, Query(description="Case-insensitive substring of the name")] = None,
    category: Annotated[str | None, Query(description="Exact category")] = None,
    min_price: Annotated[float | None, Query(alias="minPrice", ge=0, allow_inf_nan=False)] = None,
    max_price: Annotated[float | None, Query(alias="maxPrice", ge=0, allow_inf_nan=False)] = None,
) -> list[SweetOut]:
    """Filter sweets; all supplied filters must match."""
    filters = SweetSearch(
        name=name,
        category=category,
        min_price=min_price,
        max_price=max_price,
    )
    return sweet_service.search_sweets(db, filters)


@router.get("/{sweet_id}", response_model=SweetOut)
def get_sweet(sweet_id: int, db: DbSession) -> SweetOut:
    return sweet_service.get_sweet(db, sweet_id)


@router.put("/{sweet_id}", response_model=SweetOut)
def update_sweet(sweet_id: int, body: SweetUpdate, db: DbSession) -> SweetOut:
    """Apply a partial update; at least one field must be supplied."""
    return sweet_service.update_sweet(db, sweet_id, body)


@router.delete("/{sweet_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_sweet(sweet_id: int, db: DbSession, _admin: AdminUser) -> Response:
    sweet_service.delete_sweet(db, sweet_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{sweet_id}/purchase", response_model=SweetOut)
def purchase_sweet(sweet_id: int, db: DbSession) -> SweetOut:
    """Sell one unit; 400 when the sweet is out of stock."""
    return sweet_service.purchase_sweet(db, sweet_id)


@router.post("/{sweet_id}/restock", response_model=SweetOut)
def restock_sweet(
    sweet_id: int,
    body: RestockRequest,
    db: DbSession,
    _admin: AdminUser,
) -> SweetOut:
    """Add units to stock (admin only)."""
    return sweet_service.restock_sweet(db, sweet_id, body.quantity)
