# =============================================================================
# agents/conversation_engine.py - Guided Model-Creation Conversation
# =============================================================================
# Drives one session's conversation:
#
#   Idle --submit_user_message--> WaitingForReply --reply or error--> Idle
#
# - submit_user_message: append the user turn, send [system, ...turns, user]
#   through the chat proxy, append the reply or the mapped error text
# - record_upload: attach a dataset and add the scripted acknowledgement
# - choose_optimization: ask the creation guard, create the project through
#   the session's callback, and add the scripted outcome
#
# The system instruction is rebuilt for every round-trip from the current
# dataset and is never stored in the log.
# =============================================================================

import inspect
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Union

from app.exceptions import ConversationBusyError, EmptyMessageError, NoDataError
from agents.prompts.assistant_system import build_assistant_prompt
from agents.response_generator import (
    ANALYSIS_MESSAGE,
    CREATION_FAILED_MESSAGE,
    ROUND_TRIP_FALLBACK,
    WELCOME_MESSAGE,
    build_choice_message,
    build_choice_outcome,
    build_upload_notice,
)
from core.models.chat import ChatTurn, ConversationState, Message, MessageKind, MessageRole
from core.models.dataset import TabularDataset
from core.models.project import CreateModelResult, GuardDecision, ModelProject, OptimizationType
from core.services.creation_guard import CreationGuard
from lib.chat_proxy_client import ChatProxyClient, ChatProxyError

logger = logging.getLogger(__name__)

CreateModelCallback = Callable[
    [OptimizationType, TabularDataset],
    Union[CreateModelResult, Awaitable[CreateModelResult]],
]


@dataclass
class ChoiceOutcome:
    """What happened when the user picked an optimization."""

    decision: GuardDecision
    success: bool
    reply: Message
    project: ModelProject | None = None


def new_conversation_state() -> ConversationState:
    """Fresh conversation, opened with the scripted welcome."""
    state = ConversationState()
    state.append(MessageRole.ASSISTANT, WELCOME_MESSAGE, kind=MessageKind.WELCOME)
    return state


class ConversationEngine:
    """
    Conversation state machine for one session.

    Args:
        state: The session's ConversationState (owned by the session)
        client: Chat proxy client used for round-trips
        guard: The session's CreationGuard
        on_create_model: Project-creation callback, only invoked after the
            guard answered ALLOWED
    """

    def __init__(
        self,
        state: ConversationState,
        client: ChatProxyClient,
        guard: CreationGuard,
        on_create_model: CreateModelCallback,
    ):
        self.state = state
        self.client = client
        self.guard = guard
        self.on_create_model = on_create_model

    # -------------------------------------------------------------------------
    # Free-text turns
    # -------------------------------------------------------------------------

    def build_proxy_messages(self, user_message: Message) -> list[ChatTurn]:
        """
        Build the ordered message list for one round-trip.

        System instruction first, then every earlier conversational turn in
        log order, then the new user message. Welcome, upload notices and
        the analysis announcement are left out.
        """
        system = ChatTurn(role="system", content=build_assistant_prompt(self.state.dataset))
        prior = [
            ChatTurn.from_message(m)
            for m in self.state.conversational_turns()
            if m.id < user_message.id
        ]
        return [system, *prior, ChatTurn.from_message(user_message)]

    async def submit_user_message(self, text: str) -> Message:
        """
        Send a free-text message and wait for the assistant.

        Only valid while idle. Every accepted call ends with exactly one
        assistant message appended: the reply, or a user-facing error text.

        Returns:
            The assistant message appended for this turn

        Raises:
            ConversationBusyError: A reply is still pending
            EmptyMessageError: Text is empty or whitespace only
        """
        if self.state.awaiting_reply:
            raise ConversationBusyError()
        if not text or not text.strip():
            raise EmptyMessageError()

        user_message = self.state.append(MessageRole.USER, text.strip())
        self.state.awaiting_reply = True

        try:
            payload = self.build_proxy_messages(user_message)
            logger.info(f"Round-trip with {len(payload)} messages (dataset: {self.state.dataset is not None})")

            try:
                reply = await self.client.send(payload)
            except ChatProxyError as e:
                logger.warning(f"Round-trip failed ({e.category.value}): {e.detail}")
                return self.state.append(
                    MessageRole.ASSISTANT,
                    e.user_message,
                    error_category=e.category,
                )
            except Exception as e:
                logger.exception(f"Unexpected round-trip failure: {e}")
                return self.state.append(MessageRole.ASSISTANT, ROUND_TRIP_FALLBACK)

            return self.state.append(MessageRole.ASSISTANT, reply)
        finally:
            self.state.awaiting_reply = False

    # -------------------------------------------------------------------------
    # Uploads
    # -------------------------------------------------------------------------

    def record_upload(self, dataset: TabularDataset) -> list[Message]:
        """
        Attach a dataset to the conversation.

        Recording the dataset that is already attached (same object) does
        nothing. Otherwise the dataset replaces the current one and an
        upload notice plus the analysis announcement are appended.

        Returns:
            The messages appended (empty when nothing changed)
        """
        if self.state.dataset is dataset:
            return []

        self.state.dataset = dataset
        logger.info(f"Dataset {dataset.source_name} attached to conversation")
        return [
            self.state.append(MessageRole.USER, build_upload_notice(dataset), kind=MessageKind.UPLOAD_NOTICE),
            self.state.append(MessageRole.ASSISTANT, ANALYSIS_MESSAGE, kind=MessageKind.ANALYSIS_NOTICE),
        ]

    # -------------------------------------------------------------------------
    # Optimization choice
    # -------------------------------------------------------------------------

    async def choose_optimization(
        self,
        optimization_type: OptimizationType,
        label: str | None = None,
    ) -> ChoiceOutcome:
        """
        Handle the user picking an optimization.

        Appends the user's choice, consults the guard, creates the project
        when allowed, resolves the guard, and appends the outcome.

        Raises:
            NoDataError: No dataset has been uploaded yet
        """
        dataset = self.state.dataset
        if dataset is None:
            raise NoDataError()

        self.state.append(
            MessageRole.USER,
            build_choice_message(optimization_type, label),
            kind=MessageKind.CHOICE,
        )

        decision = self.guard.attempt_create(optimization_type)
        if decision != GuardDecision.ALLOWED:
            reply = self.state.append(
                MessageRole.ASSISTANT,
                build_choice_outcome(decision),
                kind=MessageKind.CHOICE_OUTCOME,
            )
            return ChoiceOutcome(decision=decision, success=False, reply=reply)

        try:
            result = self.on_create_model(optimization_type, dataset)
            if inspect.isawaitable(result):
                result = await result
        except Exception as e:
            logger.exception(f"Creating {optimization_type.value} project failed: {e}")
            self.guard.resolve(optimization_type, succeeded=False)
            reply = self.state.append(
                MessageRole.ASSISTANT,
                CREATION_FAILED_MESSAGE,
                kind=MessageKind.CHOICE_OUTCOME,
            )
            return ChoiceOutcome(decision=decision, success=False, reply=reply)

        self.guard.resolve(optimization_type, succeeded=result.success)
        reply = self.state.append(
            MessageRole.ASSISTANT,
            build_choice_outcome(decision, success=result.success, refusal=result.message),
            kind=MessageKind.CHOICE_OUTCOME,
        )
        return ChoiceOutcome(
            decision=decision,
            success=result.success,
            reply=reply,
            project=result.project,
        )
