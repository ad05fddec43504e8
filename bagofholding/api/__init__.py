from bagofholding.api.decklist import router as decklist_router
from bagofholding.api.health import router as health_router
from bagofholding.api.helvault import router as helvault_router

__all__ = [
    "decklist_router",
    "health_router",
    "helvault_router",
]
