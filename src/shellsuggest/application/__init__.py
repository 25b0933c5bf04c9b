"""Application layer - the completion pipeline.

wire -> normalizer -> context tracker -> request correlator, with the
global command cache shared between providers.
"""

from shellsuggest.application.command_cache import CACHED_PWSH_COMMANDS_KEY, GlobalCommandCache
from shellsuggest.application.config import SuggestConfig, load_suggest_config
from shellsuggest.application.context_tracker import BatchContext, ContextTracker, is_global_command
from shellsuggest.application.correlator import AcceptanceTracker, RequestCorrelator, TriggerSequence
from shellsuggest.application.normalizer import normalize, normalize_all
from shellsuggest.application.provider import PwshCompletionProvider
from shellsuggest.application.single_flight import SingleFlight
from shellsuggest.application.wire import SuggestCommand, WireShape, decode, decode_text

__all__ = [
    "CACHED_PWSH_COMMANDS_KEY",
    "GlobalCommandCache",
    "SuggestConfig",
    "load_suggest_config",
    "BatchContext",
    "ContextTracker",
    "is_global_command",
    "AcceptanceTracker",
    "RequestCorrelator",
    "TriggerSequence",
    "normalize",
    "normalize_all",
    "PwshCompletionProvider",
    "SingleFlight",
    "SuggestCommand",
    "WireShape",
    "decode",
    "decode_text",
]
