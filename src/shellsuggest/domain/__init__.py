"""Domain layer - completion types, events, errors and collaborator protocols.

This layer contains:
- types: ResultKind, RawCompletion, CompletionItem, PromptInputSnapshot, icons, shells
- events: Host-facing events and the event bus
- protocols: Interfaces for storage, prompt models, terminals and clocks
- exceptions: Domain-specific exceptions

The domain layer has no dependencies on the application or infrastructure layers.
"""
