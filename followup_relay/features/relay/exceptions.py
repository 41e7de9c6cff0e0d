"""Exceptions raised inside the follow-up relay"""


class RelayError(Exception):
    """Base class for relay errors"""


class MalformedPushPayloadError(RelayError):
    """Push payload could not be decoded into a notification request"""


class HostSurfaceError(RelayError):
    """A host-surface call (notifications, clients, windows) failed"""


class NotificationNotFoundError(RelayError, ValueError):
    """No visible notification carries the requested id"""
