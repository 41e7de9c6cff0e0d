# API module exports
from followup_relay.api import health
from followup_relay.api.base import api_router

__all__ = ["health", "api_router"]
