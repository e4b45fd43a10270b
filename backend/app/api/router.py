from fastapi import APIRouter

from app.api.allocations import router as allocations_router
from app.api.ledger import router as ledger_router

api_router = APIRouter()
api_router.include_router(allocations_router)
api_router.include_router(ledger_router)
