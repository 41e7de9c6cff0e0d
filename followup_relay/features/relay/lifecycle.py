"""Lifecycle Manager - install/activate handling"""
import logging
from typing import Any, List, Optional

from followup_relay.features.relay.effects import ClaimClients, Effect, SkipWaiting
from followup_relay.features.relay.host import HostSurface

logger = logging.getLogger(__name__)


class LifecycleManager:
    """
    Makes a new agent version take over straight away: skip the waiting
    state on install, claim every open instance on activate.
    """

    def on_install(self, payload: Optional[Any] = None, host: Optional[HostSurface] = None) -> List[Effect]:
        logger.info("Relay agent installed")
        return [SkipWaiting()]

    def on_activate(self, payload: Optional[Any] = None, host: Optional[HostSurface] = None) -> List[Effect]:
        logger.info("Relay agent activated")
        return [ClaimClients()]
