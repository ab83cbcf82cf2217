from fastapi import APIRouter

from premium_service.api.routers import guilds, premium

api_router = APIRouter()

api_router.include_router(guilds.router)
api_router.include_router(premium.router)
