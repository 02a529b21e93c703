"""
Brief service integration: REST client and the service-backed session store.
"""

from .brief_client import BriefResponse, BriefServiceClient
from .remote_store import RemoteSessionStore, create_session_store

__all__ = ["BriefResponse", "BriefServiceClient", "RemoteSessionStore", "create_session_store"]
