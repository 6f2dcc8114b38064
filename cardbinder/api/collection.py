"""
Collection API endpoints.

Reads and mutations on the active collection. Every mutation answers with
the refreshed collection view so clients never recompute totals themselves.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from cardbinder.api.catalog import CatalogCardResponse
from cardbinder.catalog.store import Catalog, get_catalog
from cardbinder.db.database import get_session
from cardbinder.db.operations import get_active_collection_id, list_items, list_prices
from cardbinder.models.collection import CardCondition, CardLanguage, CardVariant, CollectionItem
from cardbinder.services.collection_service import (
    ImportResult,
    add_card,
    adjust_quantity,
    import_collection,
    remove_item,
)
from cardbinder.services.reconciliation import (
    Completion,
    EnrichedItem,
    SetGroup,
    build_collection_view,
    missing_cards,
)

router = APIRouter(prefix="/collection", tags=["collection"])


class CompletionResponse(BaseModel):
    """Owned distinct codes over the catalog total."""

    owned: int
    total: int
    ratio: float
    percent: float

    @classmethod
    def from_completion(cls, completion: Completion) -> "CompletionResponse":
        return cls(
            owned=completion.owned,
            total=completion.total,
            ratio=completion.ratio,
            percent=completion.percent,
        )


class ItemResponse(BaseModel):
    """A collection line enriched with catalog data."""

    id: str
    card_code: str
    qty: int
    variant: CardVariant
    condition: CardCondition
    language: CardLanguage
    note: str | None = None
    name: str | None = None
    image_url: str | None = None
    set: str | None = None
    set_name: str | None = None
    market_price: float | None = None

    @classmethod
    def from_enriched(cls, enriched: EnrichedItem) -> "ItemResponse":
        item = enriched.item
        return cls(
            id=item.id,
            card_code=enriched.card_code,
            qty=item.qty,
            variant=item.variant,
            condition=item.condition,
            language=item.language,
            note=item.note,
            name=enriched.name,
            image_url=enriched.image_url,
            set=enriched.set,
            set_name=enriched.set_name,
            market_price=enriched.market_price,
        )


class SetGroupResponse(BaseModel):
    """Items of one set with completion figures."""

    set_code: str
    set_name: str
    total_cards: int
    unique_items: int
    owned_unique_codes: int
    total_in_set: int | None = None
    missing_in_set: int | None = None
    completion: CompletionResponse | None = None
    items: list[ItemResponse] = Field(default_factory=list)

    @classmethod
    def from_group(cls, group: SetGroup) -> "SetGroupResponse":
        completion = group.completion
        return cls(
            set_code=group.set_code,
            set_name=group.set_name,
            total_cards=group.total_cards,
            unique_items=group.unique_items,
            owned_unique_codes=group.owned_unique_codes,
            total_in_set=group.total_in_set,
            missing_in_set=group.missing_in_set,
            completion=CompletionResponse.from_completion(completion) if completion else None,
            items=[ItemResponse.from_enriched(it) for it in group.items],
        )


class StatsResponse(BaseModel):
    """Collection totals."""

    total_cards: int
    unique_items: int
    estimated_value: float
    missing_price: int = Field(
        ...,
        description="Quantity of copies with no known market price",
    )


class CollectionViewResponse(BaseModel):
    """Aggregate view of the active collection."""

    collection_id: str
    query: str = ""
    stats: StatsResponse
    completion: CompletionResponse
    groups: list[SetGroupResponse] = Field(default_factory=list)


class AddItemRequest(BaseModel):
    """Request model for adding copies of a card."""

    code: str = Field(..., min_length=1, examples=["OP01-001"])
    qty: int = Field(default=1, gt=0)
    variant: CardVariant = CardVariant.NORMAL
    condition: CardCondition = CardCondition.NM
    language: CardLanguage = CardLanguage.EN


class AdjustItemRequest(BaseModel):
    """Request model for changing an item's quantity."""

    delta: int = Field(..., description="Signed change; reaching 0 removes the item")


class MutationResponse(BaseModel):
    """Result of a single-item mutation."""

    item_id: str
    qty: int = Field(0, description="New quantity; 0 when the item was removed")
    removed: bool = False
    view: CollectionViewResponse


class ImportRequest(BaseModel):
    """Request model for CSV imports."""

    text: str = Field(
        ...,
        description="CSV text with a header row",
        examples=["code,qty,variant\nOP01-001,2,normal"],
    )


class ImportResponse(BaseModel):
    """Response model for CSV imports."""

    ok: bool
    status: str
    errors: list[str] = Field(default_factory=list)
    rows: int = 0
    upserted: int = 0
    view: CollectionViewResponse | None = None

    @classmethod
    def from_result(
        cls, result: ImportResult, view: CollectionViewResponse | None = None
    ) -> "ImportResponse":
        return cls(
            ok=result.ok,
            status=result.status,
            errors=result.errors,
            rows=result.rows,
            upserted=result.upserted,
            view=view,
        )


class MissingCardsResponse(BaseModel):
    """Catalog cards of a set that are not owned."""

    set_code: str
    total_in_set: int
    missing: list[CatalogCardResponse] = Field(default_factory=list)


async def load_view(
    session: AsyncSession, catalog: Catalog, query: str = ""
) -> CollectionViewResponse:
    """Reconcile the active collection against the catalog and price overlay."""
    collection_id = await get_active_collection_id(session)
    items = await list_items(session, collection_id)
    prices = await list_prices(session)
    view = build_collection_view(items, catalog, prices, query)

    return CollectionViewResponse(
        collection_id=collection_id,
        query=query,
        stats=StatsResponse(
            total_cards=view.stats.total_cards,
            unique_items=view.stats.unique_items,
            estimated_value=view.stats.estimated_value,
            missing_price=view.stats.missing_price,
        ),
        completion=CompletionResponse.from_completion(view.completion),
        groups=[SetGroupResponse.from_group(g) for g in view.groups],
    )


@router.get("", response_model=CollectionViewResponse)
async def get_collection_view(
    session: Annotated[AsyncSession, Depends(get_session)],
    catalog: Annotated[Catalog, Depends(get_catalog)],
    q: Annotated[str, Query(description="Code or name filter for the groups")] = "",
) -> CollectionViewResponse:
    """
    Get the active collection grouped by set.

    Stats and global completion always cover the whole collection; `q` only
    narrows the listed groups.
    """
    return await load_view(session, catalog, q)


@router.post("/items", response_model=MutationResponse, status_code=status.HTTP_201_CREATED)
async def add_collection_item(
    request: AddItemRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
    catalog: Annotated[Catalog, Depends(get_catalog)],
) -> MutationResponse:
    """Add copies of a catalog card, merging into a matching line."""
    item = await add_card(
        session,
        catalog,
        request.code,
        qty=request.qty,
        variant=request.variant,
        condition=request.condition,
        language=request.language,
    )
    return MutationResponse(
        item_id=item.id,
        qty=item.qty,
        view=await load_view(session, catalog),
    )


@router.patch("/items/{item_id}", response_model=MutationResponse)
async def adjust_collection_item(
    item_id: str,
    request: AdjustItemRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
    catalog: Annotated[Catalog, Depends(get_catalog)],
) -> MutationResponse:
    """Change an item's quantity; reaching zero removes it."""
    item: CollectionItem | None = await adjust_quantity(session, item_id, request.delta)
    return MutationResponse(
        item_id=item_id,
        qty=item.qty if item else 0,
        removed=item is None,
        view=await load_view(session, catalog),
    )


@router.delete("/items/{item_id}", response_model=MutationResponse)
async def delete_collection_item(
    item_id: str,
    session: Annotated[AsyncSession, Depends(get_session)],
    catalog: Annotated[Catalog, Depends(get_catalog)],
) -> MutationResponse:
    """Remove an item regardless of quantity."""
    await remove_item(session, item_id)
    return MutationResponse(
        item_id=item_id,
        removed=True,
        view=await load_view(session, catalog),
    )


@router.get("/sets/{set_code}/missing", response_model=MissingCardsResponse)
async def get_missing_cards(
    set_code: str,
    session: Annotated[AsyncSession, Depends(get_session)],
    catalog: Annotated[Catalog, Depends(get_catalog)],
    q: Annotated[str, Query(description="Code or name filter")] = "",
) -> MissingCardsResponse:
    """List catalog cards of a set not present in the active collection."""
    collection_id = await get_active_collection_id(session)
    owned = {it.card_code.upper() for it in await list_items(session, collection_id)}
    missing = missing_cards(catalog, set_code, owned, q)

    return MissingCardsResponse(
        set_code=set_code.strip().upper(),
        total_in_set=len(catalog.entries_for_set(set_code)),
        missing=[CatalogCardResponse.from_entry(e) for e in missing],
    )


@router.post("/import", response_model=ImportResponse)
async def import_collection_csv(
    request: ImportRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
    catalog: Annotated[Catalog, Depends(get_catalog)],
) -> ImportResponse:
    """
    Import collection CSV into the active collection.

    All codes are validated first; one unknown code rejects the whole file
    and nothing is written.
    """
    result = await import_collection(session, catalog, request.text)
    view = await load_view(session, catalog) if result.ok else None
    return ImportResponse.from_result(result, view)
