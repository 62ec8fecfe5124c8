import pytest

from dialogue_generator.services.dialogue_service import (
    DialogueService,
    build_dialogue_prompt,
)


class RecordingGenerator:
    def __init__(self, reply: str = "A: Hello.\nB: Hi.") -> None:
        self.reply = reply
        self.prompts: list[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        return self.reply


def test_prompt_embeds_context_verbatim() -> None:
    context = "A {heist} crew argues about 100% of the loot"

    prompt = build_dialogue_prompt(context)

    assert prompt.startswith(f"Create engaging dialogue based on this context: {context}.")
    assert "character-driven" in prompt
    assert "Include character emotions and actions where relevant." in prompt


def test_prompt_is_deterministic() -> None:
    assert build_dialogue_prompt("rain") == build_dialogue_prompt("rain")


@pytest.mark.asyncio
async def test_generate_issues_one_call_with_built_prompt() -> None:
    generator = RecordingGenerator()
    service = DialogueService(generator)

    result = await service.generate("Two old friends meet at a cafe after 10 years")

    assert result == "A: Hello.\nB: Hi."
    assert generator.prompts == [
        build_dialogue_prompt("Two old friends meet at a cafe after 10 years")
    ]
