# =============================================================================
# agents/response_generator.py - Scripted Assistant Responses
# =============================================================================
# Fixed texts the assistant adds to the conversation without a round-trip:
# welcome, upload acknowledgement, optimization choice outcomes, and the
# fallback used when a round-trip fails unexpectedly.
# =============================================================================

from core.models.dataset import TabularDataset
from core.models.project import GuardDecision, OptimizationType, optimization_info

WELCOME_MESSAGE = (
    "👋 Welcome! I'm your AI assistant. To get started, please upload your business "
    "data (CSV format) and I'll help you choose the best AI optimization for your needs."
)

UPLOAD_NOTICE_PREFIX = "📁 Uploaded: "

ANALYSIS_MESSAGE = (
    "Great! I've analyzed your data. Based on what I see, here are three AI "
    "optimizations I can help you with. Which one interests you most?"
)

CREATION_STARTED_MESSAGE = (
    "Perfect choice! 🚀 I'm creating your AI model now. Our data science team will "
    "train it with your data and you'll see results soon in your Models page."
)

CREATION_REFUSED_FALLBACK = "This model is already in progress."

CREATION_FAILED_MESSAGE = (
    "Something went wrong while setting up your model. Please choose it again in a moment."
)

ROUND_TRIP_FALLBACK = "Oops! AI assistant failed to respond. Try again in a few seconds."

# Calm replies for repeated selections; these are not errors
GUARD_REFUSAL_MESSAGES: dict[GuardDecision, str] = {
    GuardDecision.ALREADY_PROCESSING: "This model is already being prepared. Check your Models page!",
    GuardDecision.ALREADY_CREATED: "This model already exists. Check your Models page!",
}


def build_upload_notice(dataset: TabularDataset) -> str:
    """User-side annotation recording which file was uploaded."""
    return f"{UPLOAD_NOTICE_PREFIX}{dataset.source_name}"


def build_choice_message(optimization_type: OptimizationType, label: str | None = None) -> str:
    """The user's selection, as it appears in the conversation."""
    return f"I choose: {label or optimization_info(optimization_type).label}"


def build_choice_outcome(
    decision: GuardDecision,
    success: bool | None = None,
    refusal: str | None = None,
) -> str:
    """
    Assistant reply to an optimization choice.

    Args:
        decision: What the creation guard answered
        success: For ALLOWED, whether project creation succeeded
        refusal: For ALLOWED, the creation callback's explanation on failure

    Returns:
        Text to append as the assistant's reply
    """
    if decision == GuardDecision.ALLOWED:
        if success:
            return CREATION_STARTED_MESSAGE
        return refusal or CREATION_REFUSED_FALLBACK
    if decision in GUARD_REFUSAL_MESSAGES:
        return GUARD_REFUSAL_MESSAGES[decision]
    raise ValueError(f"Unhandled guard decision: {decision!r}")
