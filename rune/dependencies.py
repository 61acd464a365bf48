"""
Lazy-init shared dependencies used across routers.
"""

import logging

logger = logging.getLogger("rune-server")

# Global singletons - initialized lazily
session_store = None


def get_session_store():
    """Lazy initialization of the in-memory SessionStore"""
    global session_store
    if session_store is None:
        from rune.intake.session import SessionStore
        logger.info("Initializing SessionStore (lazy)...")
        session_store = SessionStore()
    return session_store
