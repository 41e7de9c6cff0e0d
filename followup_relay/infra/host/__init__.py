"""Host surface infrastructure module"""
from .client_registry import ClientRegistry
from .notification_center import NotificationCenter
from .surface import AgentHost, get_host_surface, reset_host_surface
from .window_launcher import WindowLauncher

__all__ = [
    "AgentHost",
    "ClientRegistry",
    "NotificationCenter",
    "WindowLauncher",
    "get_host_surface",
    "reset_host_surface",
]
