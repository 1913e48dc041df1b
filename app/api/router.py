from fastapi import APIRouter

from app.api.v1 import organizations, products, public, rfqs, tokens, tracking

api_router = APIRouter(prefix="/api/v1")

api_router.include_router(organizations.router)
api_router.include_router(products.router)
api_router.include_router(public.router)
api_router.include_router(tokens.router)
api_router.include_router(rfqs.router)
api_router.include_router(tracking.router)
