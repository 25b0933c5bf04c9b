"""Shared fixtures for shellsuggest tests."""

import asyncio
import os
import tempfile

# Keep logs and persisted state out of the user's home directory
os.environ.setdefault("SHELLSUGGEST_HOME", tempfile.mkdtemp(prefix="shellsuggest-tests-"))

import pytest

from shellsuggest.application import GlobalCommandCache, PwshCompletionProvider, SuggestConfig
from shellsuggest.application.correlator import AcceptanceTracker
from shellsuggest.domain.events import EventBus, SuggestionAccepted
from shellsuggest.domain.types import CompletionItem, Icon
from shellsuggest.infrastructure.state import InMemoryStateProvider
from shellsuggest.infrastructure.terminal import HeadlessTerminal, StaticPromptInput


def _make_item(label: str, **kwargs) -> CompletionItem:
    kwargs.setdefault("detail", label)
    kwargs.setdefault("icon", Icon.SYMBOL_METHOD)
    return CompletionItem(label=label, **kwargs)


@pytest.fixture
def make_item():
    """Factory for completion items with sensible defaults."""
    return _make_item


@pytest.fixture
def state_provider() -> InMemoryStateProvider:
    return InMemoryStateProvider()


@pytest.fixture
def slow_state_provider() -> InMemoryStateProvider:
    """In-memory storage whose reads suspend once, like a real disk read."""

    class SlowStateProvider(InMemoryStateProvider):
        async def load(self, key):
            await asyncio.sleep(0)
            return await super().load(key)

    return SlowStateProvider()


@pytest.fixture
def command_cache(state_provider) -> GlobalCommandCache:
    return GlobalCommandCache(state_provider)


@pytest.fixture
def event_bus() -> EventBus:
    return EventBus()


@pytest.fixture
def sent_sequences(event_bus) -> list[str]:
    """Sequences the provider asked the host to write to the shell."""
    sent: list[str] = []
    event_bus.subscribe(SuggestionAccepted, lambda event: sent.append(event.sequence))
    return sent


@pytest.fixture
def clock() -> AcceptanceTracker:
    return AcceptanceTracker()


@pytest.fixture
def terminal(event_bus) -> HeadlessTerminal:
    return HeadlessTerminal(event_bus)


@pytest.fixture
def prompt() -> StaticPromptInput:
    return StaticPromptInput("gi")


@pytest.fixture
def provider(command_cache, event_bus, clock, terminal, prompt) -> PwshCompletionProvider:
    """Provider attached to a focused headless terminal with prompt ``gi``."""
    provider = PwshCompletionProvider(
        command_cache,
        SuggestConfig(pwsh_code=False, pwsh_git=False),
        event_bus=event_bus,
        acceptance_clock=clock,
    )
    provider.activate(terminal)
    provider.set_prompt_input_model(prompt)
    return provider
