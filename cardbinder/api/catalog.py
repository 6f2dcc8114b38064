"""
Catalog API endpoints.

Search and exact lookup over the loaded card catalog.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field

from cardbinder.catalog.store import Catalog, get_catalog
from cardbinder.config import SEARCH_DEFAULT_LIMIT, SEARCH_MAX_LIMIT
from cardbinder.models.catalog import CatalogEntry

router = APIRouter(prefix="/catalog", tags=["catalog"])


class CatalogCardResponse(BaseModel):
    """One catalog card."""

    code: str
    name: str
    set: str
    set_name: str | None = None
    pack_id: str | None = None
    rarity: str | None = None
    color: str | None = None
    type: str | None = None
    image_url: str | None = None
    cost: str | None = None
    power: str | None = None
    traits: list[str] = Field(default_factory=list)
    market_price: float | None = None

    @classmethod
    def from_entry(cls, entry: CatalogEntry) -> "CatalogCardResponse":
        return cls(
            code=entry.code,
            name=entry.name,
            set=entry.set,
            set_name=entry.set_name,
            pack_id=entry.pack_id,
            rarity=entry.rarity,
            color=entry.color,
            type=entry.type,
            image_url=entry.image_url,
            cost=entry.cost,
            power=entry.power,
            traits=list(entry.traits),
            market_price=entry.market_price,
        )


class CatalogSearchResponse(BaseModel):
    """Search results page."""

    query: str
    limit: int
    offset: int
    results: list[CatalogCardResponse] = Field(default_factory=list)


@router.get("/search", response_model=CatalogSearchResponse)
async def search_catalog(
    catalog: Annotated[Catalog, Depends(get_catalog)],
    q: Annotated[str, Query(description="Code, name, set or trait substring")] = "",
    limit: Annotated[int, Query(ge=1, le=SEARCH_MAX_LIMIT)] = SEARCH_DEFAULT_LIMIT,
    offset: Annotated[int, Query(ge=0)] = 0,
) -> CatalogSearchResponse:
    """Case-insensitive substring search; an empty query returns no results."""
    results = catalog.search(q, limit=limit, offset=offset)
    return CatalogSearchResponse(
        query=q,
        limit=limit,
        offset=offset,
        results=[CatalogCardResponse.from_entry(e) for e in results],
    )


@router.get("/{code}", response_model=CatalogCardResponse)
async def get_catalog_card(
    code: str,
    catalog: Annotated[Catalog, Depends(get_catalog)],
) -> CatalogCardResponse:
    """Exact, case-insensitive lookup by card code."""
    entry = catalog.lookup_by_code(code)
    if entry is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Card '{code}' not found",
        )
    return CatalogCardResponse.from_entry(entry)
