from fastapi import APIRouter
from followup_relay.api import health
from followup_relay.features.relay import router as relay_router

api_router = APIRouter()

# Include all sub-routers
api_router.include_router(health.router)
api_router.include_router(relay_router)
