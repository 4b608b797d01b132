"""Prompt configuration for LLM calls made by the interpretation worker.

Each prompt documents what it is for and the model parameters it was tuned
with. Prompts are versioned by editing this module; the pipeline treats them
as pre-validated input.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .config import (
    INTERPRETATION_MAX_LENGTH,
    INTERPRETATION_MIN_LENGTH,
    INTERPRETATION_MODEL,
    INTERPRETATION_TEMPERATURE,
)


@dataclass(slots=True, frozen=True)
class ModelConfig:
    """Model parameters sent with a chat completion request."""

    model: str
    temperature: float
    max_tokens: Optional[int] = None
    # "json_object" or "text"; None falls back to "json_object"
    response_format: Optional[str] = None


@dataclass(slots=True, frozen=True)
class PromptConfig:
    """A system prompt plus the model configuration it expects."""

    id: str
    name: str
    description: str
    system_prompt: str
    model: ModelConfig
    input_sources: List[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Event interpretation
# ---------------------------------------------------------------------------

_INTERPRETATION_SYSTEM_PROMPT = f"""
You are the analyst inside a personal life-tracking system. The user logs raw
events: workouts, meals, habits, cravings, sleep and anything else going on in
their day. Their baseline document describes their goals, routines, struggles
and values, and is the reference frame for everything you write.

## YOUR ROLE
You receive one raw event. The user already knows what they did. Explain how it
went, what it means, and what it reveals about their current state. Reason
about the data instead of restating it.

## OUTPUT STYLE
- Speak directly to the user by name.
- Be specific and definitive. Do not hedge when the data supports a claim.
- Scale depth to significance: a routine event needs a few sentences, a
  failure, record, relapse or broken streak deserves a full analysis.
- Do not give advice and do not ask questions.
- End with 3-5 semantic tags, for example: [gym] [bench-press] [fatigue]

## OUTPUT FORMAT
Respond with a JSON object with exactly one key, "interpretation", whose value
is your interpretation as a single string between {INTERPRETATION_MIN_LENGTH}
and {INTERPRETATION_MAX_LENGTH} characters long.
""".strip()

INTERPRETATION_PROMPT = PromptConfig(
    id="interpretation",
    name="Event Interpretation",
    description=(
        "Generates an analytical interpretation of a single event that becomes "
        "the primary semantic document for retrieval and pattern detection."
    ),
    system_prompt=_INTERPRETATION_SYSTEM_PROMPT,
    model=ModelConfig(
        model=INTERPRETATION_MODEL,
        temperature=INTERPRETATION_TEMPERATURE,
        response_format="json_object",
    ),
    input_sources=[
        "event.content - raw text of what the user said or did",
        "event.occurredAt - ISO-8601 timestamp of the event",
        "userName - the user's display name",
        "userBaseline - the user's self-description, routines and goals",
    ],
)

__all__ = ["ModelConfig", "PromptConfig", "INTERPRETATION_PROMPT"]
