"""Security package for Reef Magazine."""

from .config import configure_secure_session, configure_security_headers
from .sessions import MemorySessionStore, ServerSideSessionInterface

__all__ = [
    'configure_secure_session',
    'configure_security_headers',
    'MemorySessionStore',
    'ServerSideSessionInterface',
]
