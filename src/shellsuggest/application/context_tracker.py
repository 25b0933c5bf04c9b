"""Context tracker.

Decides whether an inbound batch answers a global (first word) or a
contextual (argument) completion request and keeps the state the host UI
needs between batches: the prompt snapshot, the leading line content, the
detected path separator and the last accepted directory.
"""

from dataclasses import dataclass
from typing import Iterable, Optional

from shellsuggest.application.wire import CompletionsMessage
from shellsuggest.domain.exceptions import ProtocolDecodeError
from shellsuggest.domain.types import (
    CompletionItem,
    PromptInputSnapshot,
    detect_separator,
    host_separator,
    normalize_path_separator,
)
from shellsuggest.logger import get_logger

logger = get_logger("suggest.context")


def is_global_command(leading_line_content: str) -> bool:
    """A line with no argument yet, unless it opens a ``[Type]`` expression."""
    return " " not in leading_line_content and not leading_line_content.startswith("[")


@dataclass(frozen=True)
class BatchContext:
    """Classification of one inbound batch.

    Attributes:
        is_global: Whether the batch answers a first word completion
        replacement_index: Start of the span replaced on acceptance
        replacement_length: Length of the span replaced on acceptance
    """

    is_global: bool
    replacement_index: int
    replacement_length: int


class ContextTracker:
    """Tracks prompt context across completion batches."""

    def __init__(self, default_separator: Optional[str] = None):
        self.snapshot: Optional[PromptInputSnapshot] = None
        self.leading_line_content: Optional[str] = None
        self.normalized_leading_line_content: Optional[str] = None
        self.path_separator: str = default_separator or host_separator()
        self.is_filtering_directories = False
        self.cursor_index_delta = 0
        self.most_recent_completion: Optional[CompletionItem] = None

    def remember_accepted(self, item: Optional[CompletionItem]) -> None:
        """Record the candidate the user accepted last."""
        self.most_recent_completion = item

    def begin_batch(self, snapshot: PromptInputSnapshot, message: CompletionsMessage) -> BatchContext:
        """Capture the prompt and classify the batch.

        Global batches replace the text up to the cursor. Contextual batches
        use the window supplied by the shell.

        Raises:
            ProtocolDecodeError: If a contextual message has no replacement window
        """
        self.snapshot = snapshot
        end = max(snapshot.cursor_index + self.cursor_index_delta, 0)
        leading = snapshot.prefix[:end]
        self.leading_line_content = leading

        if is_global_command(leading):
            logger.debug(f"Global completion batch for '{leading}'")
            return BatchContext(is_global=True, replacement_index=0, replacement_length=snapshot.cursor_index)

        if message.replacement_index is None or message.replacement_length is None:
            raise ProtocolDecodeError("Contextual completion message has no replacement window", message)
        self.leading_line_content = snapshot.prefix
        logger.debug(
            f"Contextual completion batch, replacing {message.replacement_length} "
            f"chars at {message.replacement_index}"
        )
        return BatchContext(
            is_global=False,
            replacement_index=message.replacement_index,
            replacement_length=message.replacement_length,
        )

    def finish_batch(
        self,
        context: BatchContext,
        items: list[CompletionItem],
        cached_commands: Iterable[CompletionItem] = (),
    ) -> list[CompletionItem]:
        """Augment a decoded batch and update the tracked state.

        Args:
            context: Result of ``begin_batch``
            items: Normalized items of the batch
            cached_commands: Global commands appended to global batches

        Returns:
            The list handed to the host UI
        """
        completions = list(items)
        if context.is_global:
            completions.extend(cached_commands)

        carried = self.most_recent_completion
        if carried is not None and carried.is_directory and all(c.is_directory for c in completions):
            completions.append(carried)
        self.most_recent_completion = None

        if self.snapshot is not None:
            self.cursor_index_delta = self.snapshot.cursor_index - (
                context.replacement_index + context.replacement_length
            )

        normalized = self.leading_line_content or ""
        first_directory = next((c for c in completions if c.is_directory), None)
        self.is_filtering_directories = first_directory is not None
        if first_directory is not None:
            self.path_separator = detect_separator(first_directory.label) or host_separator()
            normalized = normalize_path_separator(normalized, self.path_separator)
        self.normalized_leading_line_content = normalized

        return completions
