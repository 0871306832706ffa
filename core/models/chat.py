# =============================================================================
# core/models/chat.py - Conversation & Chat Proxy Schemas
# =============================================================================
# These models define the conversation log and the chat proxy contract:
# - Message: one entry in the append-only conversation log
# - ConversationState: the log, the current dataset and the reply gate
# - ChatTurn: the role/content pair that travels to the proxy
# - ProxyChatRequest / ProxyChatResponse / ProxyErrorResponse: POST /api/chat
#
# Flow:
# 1. Engine appends the user's Message and sets awaiting_reply
# 2. Engine sends [system, ...turns, user] as ChatTurns through the proxy
# 3. Engine appends the assistant's reply (or mapped error) and clears the gate
# =============================================================================

import itertools
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from .dataset import TabularDataset


class MessageRole(str, Enum):
    """
    Who a message is attributed to.

    - system: synthesized instruction, only ever sent to the provider
    - user: the human user
    - assistant: the AI assistant (replies and scripted messages)
    """
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


class MessageKind(str, Enum):
    """
    What a logged message represents.

    Only CHAT, CHOICE and CHOICE_OUTCOME are conversational turns. The
    others are annotations shown to the user and never sent to the proxy.
    """
    WELCOME = "welcome"
    CHAT = "chat"
    UPLOAD_NOTICE = "upload_notice"
    ANALYSIS_NOTICE = "analysis_notice"
    CHOICE = "choice"
    CHOICE_OUTCOME = "choice_outcome"


CONVERSATIONAL_KINDS = frozenset({
    MessageKind.CHAT,
    MessageKind.CHOICE,
    MessageKind.CHOICE_OUTCOME,
})


class ProxyErrorCategory(str, Enum):
    """
    Closed set of user-facing failure categories for a proxy round-trip.

    - configuration_error: no provider credential on the server (not retryable)
    - bad_request: malformed messages or provider 400
    - unauthorized: provider 401
    - rate_limited: provider 429
    - upstream_unavailable: provider 500, network failure or timeout
    - unknown: any other non-2xx
    """
    CONFIGURATION_ERROR = "configuration_error"
    BAD_REQUEST = "bad_request"
    UNAUTHORIZED = "unauthorized"
    RATE_LIMITED = "rate_limited"
    UPSTREAM_UNAVAILABLE = "upstream_unavailable"
    UNKNOWN = "unknown"


class Message(BaseModel):
    """
    One entry in the conversation log. Never mutated once appended.

    Example:
        {
            "id": 3,
            "role": "assistant",
            "kind": "chat",
            "content": "Your sku column looks like a good fit for...",
            "timestamp": "2024-01-15T10:30:00Z",
            "error_category": null
        }
    """

    model_config = ConfigDict(frozen=True)

    id: int = Field(..., ge=1, description="Monotonic id within the session")
    role: MessageRole
    content: str
    kind: MessageKind = MessageKind.CHAT
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    # Set when an assistant message was produced from a failed round-trip
    error_category: ProxyErrorCategory | None = None

    @property
    def is_conversational(self) -> bool:
        """True when this message is a turn worth re-sending to the proxy."""
        return (
            self.role != MessageRole.SYSTEM
            and self.kind in CONVERSATIONAL_KINDS
            and bool(self.content.strip())
        )


class ChatTurn(BaseModel):
    """
    A role/content pair as the completion provider expects it.

    Example:
        {"role": "user", "content": "Which optimization fits my data?"}
    """

    role: Literal["system", "user", "assistant"]
    content: str

    @classmethod
    def from_message(cls, message: Message) -> "ChatTurn":
        """Build a turn from a logged message."""
        return cls(role=message.role.value, content=message.content)


@dataclass
class ConversationState:
    """
    Mutable conversation state owned by exactly one session.

    At most one round-trip is outstanding at a time: `awaiting_reply`
    gates new sends. Messages are only ever appended.
    """

    messages: list[Message] = field(default_factory=list)
    dataset: TabularDataset | None = None
    awaiting_reply: bool = False
    _ids: itertools.count = field(default_factory=lambda: itertools.count(1), repr=False)

    def append(
        self,
        role: MessageRole,
        content: str,
        kind: MessageKind = MessageKind.CHAT,
        error_category: ProxyErrorCategory | None = None,
    ) -> Message:
        """Append a message with the next id and return it."""
        message = Message(
            id=next(self._ids),
            role=role,
            content=content,
            kind=kind,
            error_category=error_category,
        )
        self.messages.append(message)
        return message

    def conversational_turns(self) -> list[Message]:
        """Logged messages that count as conversation, in order."""
        return [m for m in self.messages if m.is_conversational]


# =============================================================================
# Chat Proxy Wire Schemas
# =============================================================================

class ProxyChatRequest(BaseModel):
    """
    Body of POST /api/chat.

    Example:
        {
            "messages": [
                {"role": "system", "content": "You are a helpful AI assistant..."},
                {"role": "user", "content": "What can I do with this data?"}
            ]
        }
    """

    messages: list[ChatTurn] = Field(
        ...,
        description="Ordered messages, system instruction first"
    )


class ProxyChatResponse(BaseModel):
    """Successful proxy reply: the assistant's text only."""

    message: str


class ProxyErrorResponse(BaseModel):
    """Failed proxy reply, sent with a non-2xx status."""

    error: str
    code: str | None = None
