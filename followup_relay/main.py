import logging

# Log configuration (before other imports)
# ruff: noqa: E402
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    force=True
)

from contextlib import asynccontextmanager  # noqa: E402

from fastapi import FastAPI  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402
from followup_relay.api.base import api_router  # noqa: E402
from followup_relay.config import ALLOWED_ORIGINS  # noqa: E402
from followup_relay.features.relay.service import get_relay_agent  # noqa: E402


@asynccontextmanager
async def lifespan(app: FastAPI):
    agent = get_relay_agent()
    await agent.start()
    yield
    await agent.drain()


app = FastAPI(
    title="Follow-up Relay",
    description="Relays notification quick responses to open application instances",
    version="1.0.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include all API routes
app.include_router(api_router)


@app.get("/")
def read_root():
    return {
        "message": "Follow-up Relay",
        "docs": "/docs",
        "version": "1.0.0"
    }
