"""Per-session state for the dialogue generation flow."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable, Protocol, Union

from dialogue_generator.exceptions import ServiceError
from dialogue_generator.input_gate import Accepted, submit
from dialogue_generator.models import StateFrame

logger = logging.getLogger(__name__)

Clock = Callable[[], float]

GENERIC_FAILURE_MESSAGE = "An error occurred while generating the dialogue"


class DialogueGenerator(Protocol):
    async def generate(self, context: str) -> str: ...


@dataclass(frozen=True)
class Idle:
    status = "idle"


@dataclass(frozen=True)
class Pending:
    status = "pending"


@dataclass(frozen=True)
class Success:
    text: str
    status = "success"


@dataclass(frozen=True)
class Failure:
    message: str
    status = "failure"


GenerationResult = Union[Idle, Pending, Success, Failure]


class ClipboardFlag:
    """Copy feedback that stays raised for a fixed window.

    Raising the flag again while it is still up does not extend the window.
    """

    def __init__(self, window: float = 2.0, clock: Clock = time.monotonic) -> None:
        self._window = window
        self._clock = clock
        self._raised_at: float | None = None

    @property
    def window(self) -> float:
        return self._window

    @property
    def active(self) -> bool:
        if self._raised_at is None:
            return False
        if self._clock() - self._raised_at < self._window:
            return True
        self._raised_at = None
        return False

    def raise_flag(self) -> None:
        if not self.active:
            self._raised_at = self._clock()


class DialogueSession:
    """Draft, generation result and single-flight guard of one UI session."""

    def __init__(
        self,
        generator: DialogueGenerator,
        *,
        copy_window: float = 2.0,
        clock: Clock = time.monotonic,
    ) -> None:
        self._generator = generator
        self._draft = ""
        self._result: GenerationResult = Idle()
        self._in_flight = False
        self._clipboard = ClipboardFlag(copy_window, clock)

    @property
    def draft(self) -> str:
        return self._draft

    @property
    def result(self) -> GenerationResult:
        return self._result

    @property
    def busy(self) -> bool:
        return self._in_flight

    @property
    def copied(self) -> bool:
        return self._clipboard.active

    @property
    def copy_window(self) -> float:
        return self._clipboard.window

    def edit(self, text: str) -> None:
        self._draft = text

    def trigger(self) -> asyncio.Task[GenerationResult] | None:
        """Start a generation for the current draft if one is allowed.

        Returns None, with no state change, for a blank draft or while a
        previous request is still pending. Otherwise the session is Pending
        once this returns and the generation runs as a task on the current
        event loop. Cancelling that task restores the previous result.
        """

        decision = submit(self._draft)
        if not isinstance(decision, Accepted):
            return None
        if self._in_flight:
            logger.debug("Generation already pending; trigger ignored")
            return None

        previous = self._result
        self._in_flight = True
        self._result = Pending()
        task = asyncio.ensure_future(self._resolve(decision.context))
        task.add_done_callback(lambda done: self._settle(done, previous))
        return task

    async def generate(self) -> GenerationResult | None:
        """Trigger and wait for the outcome; None when nothing was dispatched."""

        resolution = self.trigger()
        if resolution is None:
            return None
        return await resolution

    def mark_copied(self) -> bool:
        """Raise the copy flag; only a successful dialogue can be copied."""

        if not isinstance(self._result, Success):
            return False
        self._clipboard.raise_flag()
        return True

    def snapshot(self) -> StateFrame:
        result = self._result
        return StateFrame(
            status=result.status,
            dialogue=result.text if isinstance(result, Success) else None,
            error=result.message if isinstance(result, Failure) else None,
            copied=self.copied,
            busy=self.busy,
        )

    async def _resolve(self, context: str) -> GenerationResult:
        try:
            text = await self._generator.generate(context)
        except ServiceError as exc:
            logger.info("Dialogue generation failed", extra={"code": exc.code})
            self._result = Failure(exc.message or GENERIC_FAILURE_MESSAGE)
        except Exception:
            logger.exception("Unexpected dialogue generation error")
            self._result = Failure(GENERIC_FAILURE_MESSAGE)
        else:
            self._result = Success(text)
        finally:
            self._in_flight = False
        return self._result

    def _settle(self, task: asyncio.Task[GenerationResult], previous: GenerationResult) -> None:
        self._in_flight = False
        if task.cancelled() and isinstance(self._result, Pending):
            self._result = previous
