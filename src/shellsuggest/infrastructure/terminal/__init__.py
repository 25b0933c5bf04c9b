"""Terminal stream handling for running the provider outside an editor."""

from shellsuggest.infrastructure.terminal.headless import HeadlessTerminal, StaticPromptInput
from shellsuggest.infrastructure.terminal.osc import OscStreamParser

__all__ = [
    "HeadlessTerminal",
    "StaticPromptInput",
    "OscStreamParser",
]
