"""Request correlator.

Turns a host request for completions into trigger sequences for the shell
and waits for the shell's answer. The protocol has no correlation ids, so
requests are single-flight: while one is outstanding, further requests share
its result and send nothing new.
"""

import time
from enum import Enum
from typing import Optional

from shellsuggest.application.command_cache import GlobalCommandCache
from shellsuggest.application.config import SuggestConfig
from shellsuggest.application.single_flight import SingleFlight
from shellsuggest.domain.events import CompletionsRequested, EventBus, SuggestionAccepted
from shellsuggest.domain.protocols import AcceptanceClock
from shellsuggest.domain.types import CompletionItem
from shellsuggest.logger import get_logger

logger = get_logger("suggest.correlator")

CompletionResult = Optional[list[CompletionItem]]


class TriggerSequence(str, Enum):
    """Key sequences bound by the shell integration script (F12 + letter)."""

    REQUEST_COMPLETIONS = "\x1b[24~e"
    REQUEST_GLOBAL_COMPLETIONS = "\x1b[24~f"
    ENABLE_GIT_COMPLETIONS = "\x1b[24~g"
    ENABLE_CODE_COMPLETIONS = "\x1b[24~h"


class AcceptanceTracker:
    """Default ``AcceptanceClock`` kept by the suggest widget."""

    def __init__(self) -> None:
        self._last_accepted_timestamp = 0.0

    @property
    def last_accepted_timestamp(self) -> float:
        return self._last_accepted_timestamp

    def mark_completion_accepted(self, timestamp: Optional[float] = None) -> None:
        self._last_accepted_timestamp = time.time() if timestamp is None else timestamp


class RequestCorrelator:
    """Two-state machine: idle, or awaiting one batch from the shell.

    Triggers sent when a request starts from idle:
    - each extra completion source is enabled at most once per lifetime
    - global commands are requested while the command cache is empty
    - contextual completions are requested only if the user typed since the
      last accepted completion
    """

    def __init__(
        self,
        event_bus: EventBus,
        command_cache: GlobalCommandCache,
        acceptance_clock: AcceptanceClock,
        flight: Optional[SingleFlight[CompletionResult]] = None,
    ):
        self._event_bus = event_bus
        self._command_cache = command_cache
        self._acceptance_clock = acceptance_clock
        self._flight: SingleFlight[CompletionResult] = flight or SingleFlight()
        self._code_completions_requested = False
        self._git_completions_requested = False
        self.last_user_data_timestamp = 0.0

    @property
    def awaiting(self) -> bool:
        """True while a request waits for the shell."""
        return self._flight.pending

    def record_user_data(self, timestamp: Optional[float] = None) -> None:
        """Note that the user sent input to the shell."""
        self.last_user_data_timestamp = time.time() if timestamp is None else timestamp

    def _send(self, sequence: TriggerSequence) -> None:
        logger.debug(f"Sending trigger {sequence.name}")
        self._event_bus.publish(SuggestionAccepted(sequence=sequence.value))

    async def request_completions(self, config: SuggestConfig) -> CompletionResult:
        """Ask the shell for completions and wait for the next batch.

        Returns:
            The normalized items, or None when the terminal could not show them
        """
        if self._flight.pending:
            logger.debug("Completion request already in flight, sharing its result")
            return await self._flight.join()

        await self._command_cache.ensure_hydrated()
        if self._flight.pending:
            return await self._flight.join()
        future = self._flight.open()

        if not self._code_completions_requested and config.pwsh_code:
            self._send(TriggerSequence.ENABLE_CODE_COMPLETIONS)
            self._code_completions_requested = True
        if not self._git_completions_requested and config.pwsh_git:
            self._send(TriggerSequence.ENABLE_GIT_COMPLETIONS)
            self._git_completions_requested = True

        if self._command_cache.is_empty():
            self._send(TriggerSequence.REQUEST_GLOBAL_COMPLETIONS)

        # Prevent requesting again right after a completion was accepted
        if self.last_user_data_timestamp > self._acceptance_clock.last_accepted_timestamp:
            self._send(TriggerSequence.REQUEST_COMPLETIONS)
            self._event_bus.publish(CompletionsRequested())

        return await future

    def deliver(self, result: CompletionResult) -> bool:
        """Resolve the outstanding request, if any.

        Returns:
            True if a request was waiting
        """
        return self._flight.resolve(result)
