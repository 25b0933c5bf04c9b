"""PowerShell completion provider.

Wires the wire decoder, normalizer, context tracker, request correlator and
global command cache behind the interface the terminal suggest UI uses:

- ``request_completions()`` asks the shell and waits for its answer
- ``handle_sequence()`` consumes OSC 633 data sent by the shell
- events on ``event_bus`` tell the host what to write to the shell

Everything runs on the terminal's event loop. The only suspension points
are the wait for the shell's answer and the first read of persisted storage.
"""

from typing import Iterable, Optional

from shellsuggest.application.command_cache import GlobalCommandCache
from shellsuggest.application.config import SUGGEST_ENABLED_SETTING, SuggestConfig
from shellsuggest.application.context_tracker import ContextTracker
from shellsuggest.application.correlator import AcceptanceTracker, CompletionResult, RequestCorrelator
from shellsuggest.application.normalizer import normalize_all
from shellsuggest.application.wire import (
    OSC_IDENTIFIER,
    SuggestCommand,
    decode_text,
    parse_completions_message,
    parse_pwsh_commands_message,
    split_message,
)
from shellsuggest.domain.events import CompletionsReceived, EventBus
from shellsuggest.domain.exceptions import ProtocolDecodeError, UnsupportedShellError
from shellsuggest.domain.protocols import AcceptanceClock, PromptInputModel, TerminalView
from shellsuggest.domain.types import CompletionItem, PromptInputSnapshot, ShellType
from shellsuggest.logger import get_logger

logger = get_logger("suggest.provider")


class PwshCompletionProvider:
    """Completion provider for PowerShell terminals.

    Example:
        >>> cache = GlobalCommandCache(FileStateProvider(config.storage_dir))
        >>> provider = PwshCompletionProvider(cache, config)
        >>> provider.event_bus.subscribe(SuggestionAccepted, lambda e: pty.write(e.sequence))
        >>> provider.activate(terminal)
        >>> provider.set_prompt_input_model(command_detection.prompt_input_model)
        >>> items = await provider.request_completions()
    """

    ID = "terminal.pwshCompletionProvider"
    shell_types = [ShellType.POWERSHELL]

    def __init__(
        self,
        command_cache: GlobalCommandCache,
        config: Optional[SuggestConfig] = None,
        event_bus: Optional[EventBus] = None,
        shell_type: Optional[ShellType] = None,
        acceptance_clock: Optional[AcceptanceClock] = None,
        tracker: Optional[ContextTracker] = None,
    ):
        """
        Args:
            command_cache: Shared global command cache
            config: Suggest configuration, defaults to ``SuggestConfig()``
            event_bus: Bus for host-facing events, a new one by default
            shell_type: Shell of the terminal, None when not yet known
            acceptance_clock: Timestamp source of the last accepted suggestion
            tracker: Context tracker, a new one by default

        Raises:
            UnsupportedShellError: If shell_type is known and not PowerShell
        """
        if shell_type is not None and shell_type not in self.shell_types:
            raise UnsupportedShellError(shell_type)

        self.config = config or SuggestConfig()
        self.event_bus = event_bus or EventBus()
        self.command_cache = command_cache
        self.acceptance_clock = acceptance_clock or AcceptanceTracker()
        self.tracker = tracker or ContextTracker()
        self.correlator = RequestCorrelator(self.event_bus, command_cache, self.acceptance_clock)

        self.enable_widget = True
        self.is_pasting = False
        self._terminal: Optional[TerminalView] = None
        self._prompt_input_model: Optional[PromptInputModel] = None

    @property
    def terminal(self) -> Optional[TerminalView]:
        return self._terminal

    @property
    def prompt_input_model(self) -> Optional[PromptInputModel]:
        return self._prompt_input_model

    def set_prompt_input_model(self, model: Optional[PromptInputModel]) -> None:
        """Follow the command detection capability being added or removed."""
        if model is not self._prompt_input_model:
            logger.debug(f"Prompt input model {'attached' if model is not None else 'detached'}")
        self._prompt_input_model = model

    def activate(self, terminal: TerminalView) -> None:
        """Attach to a terminal.

        User input is always tracked. The OSC handler is only registered
        while the suggest feature is enabled.
        """
        self._terminal = terminal
        terminal.on_data(self._on_user_data)
        if not self.config.enabled:
            logger.info("Terminal suggest disabled, not listening for completions")
            return
        terminal.register_osc_handler(OSC_IDENTIFIER, self.handle_sequence)
        logger.info(f"{self.ID} activated")

    def _on_user_data(self, data: str) -> None:
        self.correlator.record_user_data()

    def on_completion_accepted(self, item: CompletionItem) -> None:
        """Called by the host when the user accepts a suggestion."""
        self.tracker.remember_accepted(item)

    def on_configuration_changed(
        self, changed_settings: Iterable[str], config: Optional[SuggestConfig] = None
    ) -> None:
        """React to settings changes.

        Args:
            changed_settings: Identifiers of the settings that changed
            config: The new configuration, if it changed
        """
        if config is not None:
            self.config = config
        if SUGGEST_ENABLED_SETTING in set(changed_settings):
            self.clear_suggest_cache()

    def clear_suggest_cache(self) -> None:
        self.command_cache.clear()

    async def request_completions(self, value: str = "") -> CompletionResult:
        """Request completions for the current prompt.

        Args:
            value: Current input line, kept for interface compatibility

        Returns:
            Items to show, or None when there is nothing the terminal can show
        """
        return await self.correlator.request_completions(self.config)

    def handle_sequence(self, data: str) -> bool:
        """Consume the data of one OSC 633 sequence.

        Returns:
            True if the message was handled, False if it is not a completion
            message or no terminal is attached

        Raises:
            ProtocolDecodeError: If a completion payload is malformed
        """
        if self._terminal is None:
            return False

        command, _ = split_message(data)
        if command == SuggestCommand.COMPLETIONS.value:
            self._handle_completions(data)
            return True
        if command == SuggestCommand.COMPLETIONS_PWSH_COMMANDS.value:
            return self._handle_pwsh_commands(data)

        logger.debug(f"Unhandled sequence '{command}'")
        return False

    def _active_prompt_input(self) -> Optional[PromptInputModel]:
        """Prompt model to read, or None when suggestions cannot be shown."""
        terminal = self._terminal
        if terminal is None or not terminal.is_attached or not self.enable_widget:
            return None
        # Only show the suggest widget if the terminal is focused
        if not terminal.has_focus():
            return None
        return self._prompt_input_model

    def _handle_completions(self, data: str) -> None:
        self.event_bus.publish(CompletionsReceived())

        prompt_input = self._active_prompt_input()
        if prompt_input is None:
            logger.debug("Terminal not focused or attached, resolving with no completions")
            self.correlator.deliver(None)
            return

        snapshot = PromptInputSnapshot.capture(prompt_input)
        try:
            message = parse_completions_message(data)
            context = self.tracker.begin_batch(snapshot, message)
            raws = decode_text(message.payload)
        except ProtocolDecodeError:
            self.correlator.deliver(None)
            raise

        items = normalize_all(
            raws,
            context.replacement_index,
            context.replacement_length,
            default_separator=self.tracker.path_separator,
        )
        cached = self.command_cache.snapshot() if context.is_global else ()
        completions = self.tracker.finish_batch(context, items, cached)
        logger.debug(f"Received {len(items)} completions ({len(completions)} after augmentation)")
        self.correlator.deliver(completions)

    def _handle_pwsh_commands(self, data: str) -> bool:
        message = parse_pwsh_commands_message(data)
        items = normalize_all(decode_text(message.payload), 0, 0)
        self.command_cache.replace(items)
        logger.info(f"Received {len(items)} global commands (batch type '{message.batch_type}')")
        return True
