"""Protocols for the host environment a decorator plugs into."""

from hotpotato.interfaces.host import ChangeListener, DecorationHost, NotificationSource

__all__ = [
    "ChangeListener",
    "DecorationHost",
    "NotificationSource",
]
