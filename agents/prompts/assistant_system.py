# =============================================================================
# agents/prompts/assistant_system.py - Optimization Assistant System Prompt
# =============================================================================
# Builds the system instruction that opens every proxy round-trip.
#
# The prompt is regenerated for each round-trip from the current dataset,
# so it always reflects the latest upload. It is never stored in the
# conversation log.
#
# Usage:
#   prompt = build_assistant_prompt(state.dataset)
# =============================================================================

from __future__ import annotations

from core.models.dataset import TabularDataset

# =============================================================================
# Base System Prompt
# =============================================================================

ASSISTANT_ROLE = (
    "You are a helpful AI assistant that helps clients understand what can be "
    "done with their uploaded business data."
)

NO_DATA_GUIDANCE = (
    "Guide them to upload their data first, then suggest AI optimizations."
)

DATASET_TEMPLATE = (
    'The user has uploaded a CSV file named "{file_name}" with columns: {columns}. '
    "Help them understand how AI can optimize their business using this data."
)


def build_assistant_prompt(dataset: TabularDataset | None) -> str:
    """
    Build the system instruction for one round-trip.

    Args:
        dataset: The session's current dataset, if any

    Returns:
        Schema-aware prompt naming the file and every header verbatim when a
        dataset is present, otherwise a generic prompt asking for an upload.
    """
    if dataset is None:
        return f"{ASSISTANT_ROLE} {NO_DATA_GUIDANCE}"

    return f"{ASSISTANT_ROLE} " + DATASET_TEMPLATE.format(
        file_name=dataset.source_name,
        columns=dataset.describe_schema(),
    )
