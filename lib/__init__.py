# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - ingestor.py: Tabular Ingestor - turns CSV text into headers + preview rows
# - chat_proxy_client.py: Client for the chat proxy with error categories
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.ingestor import parse_tabular, validate_upload
from lib.chat_proxy_client import ChatProxyClient, ChatProxyError, category_message

__all__ = [
    # Ingestor
    "parse_tabular",
    "validate_upload",
    # Chat proxy
    "ChatProxyClient",
    "ChatProxyError",
    "category_message",
]
