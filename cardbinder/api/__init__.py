from cardbinder.api.catalog import router as catalog_router
from cardbinder.api.collection import router as collection_router
from cardbinder.api.health import router as health_router
from cardbinder.api.prices import router as prices_router

__all__ = [
    "catalog_router",
    "collection_router",
    "health_router",
    "prices_router",
]
