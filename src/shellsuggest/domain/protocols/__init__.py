"""Domain protocols - interfaces for collaborators of the completion core.

The completion core only talks to the terminal, the prompt model, the
suggest widget's acceptance clock and persisted storage through these
structural types, which keeps it testable with simple fakes.
"""

from shellsuggest.domain.protocols.prompt import PromptInputModel
from shellsuggest.domain.protocols.state import StateProvider, StorageScope, scoped_key
from shellsuggest.domain.protocols.terminal import AcceptanceClock, OscHandler, TerminalView

__all__ = [
    "PromptInputModel",
    "StateProvider",
    "StorageScope",
    "scoped_key",
    "AcceptanceClock",
    "OscHandler",
    "TerminalView",
]
