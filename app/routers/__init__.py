# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - chat_proxy.py: Stateless chat proxy to the completion provider
# - sessions.py: Session creation, inspection and reset
# - upload.py: CSV upload and parsing
# - chat.py: Conversation and optimization choice endpoints
# - models.py: Model project listing and status updates
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import chat_proxy
from . import sessions
from . import upload
from . import chat
from . import models

__all__ = [
    "health",
    "chat_proxy",
    "sessions",
    "upload",
    "chat",
    "models",
]
