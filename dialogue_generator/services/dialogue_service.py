"""Dialogue generation on top of a text generator."""

from __future__ import annotations

import logging

from dialogue_generator.services.gemini_client import TextGenerator

logger = logging.getLogger(__name__)

DIALOGUE_PROMPT_TEMPLATE = (
    "Create engaging dialogue based on this context: {context}.\n"
    "The dialogue should be natural, character-driven, and appropriate for the given context.\n"
    "Consider the tone, setting, and character relationships to create authentic conversations.\n"
    "Include character emotions and actions where relevant."
)


def build_dialogue_prompt(context: str) -> str:
    """Interpolate the user's context into the fixed instruction."""

    return DIALOGUE_PROMPT_TEMPLATE.format(context=context)


class DialogueService:
    """Turns a scene description into generated dialogue."""

    def __init__(self, generator: TextGenerator) -> None:
        self._generator = generator

    async def generate(self, context: str) -> str:
        """Issue exactly one generation call for ``context``.

        Failures propagate as ``ServiceError`` subclasses from the generator.
        """

        prompt = build_dialogue_prompt(context)
        logger.debug("Dispatching dialogue generation", extra={"context_chars": len(context)})
        return await self._generator.generate(prompt)
