"""Price overlay endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from cardbinder.api.collection import ImportRequest, ImportResponse, load_view
from cardbinder.catalog.store import Catalog, get_catalog
from cardbinder.db.database import get_session
from cardbinder.services.collection_service import import_prices

router = APIRouter(prefix="/prices", tags=["prices"])


@router.post("/import", response_model=ImportResponse)
async def import_price_csv(
    request: ImportRequest,
    session: Annotated[AsyncSession, Depends(get_session)],
    catalog: Annotated[Catalog, Depends(get_catalog)],
) -> ImportResponse:
    """
    Import a price CSV (code, trend_eur, avg30_eur[, updated_at[, url]]).

    Each code's stored price is replaced wholesale.
    """
    result = await import_prices(session, request.text)
    view = await load_view(session, catalog) if result.ok else None
    return ImportResponse.from_result(result, view)
