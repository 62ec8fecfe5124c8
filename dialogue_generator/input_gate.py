"""Validation of the user's draft before a generation is dispatched."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Accepted:
    """A draft that may be sent to the generator, kept verbatim."""

    context: str


@dataclass(frozen=True)
class Rejected:
    """A blank draft. Triggering generation with it is a silent no-op."""

    reason: str = "blank"


def submit(draft: str) -> Accepted | Rejected:
    """Accept any draft with at least one non-whitespace character."""

    if not draft.strip():
        return Rejected()
    return Accepted(context=draft)
