"""Custom exception hierarchy for puzzle generation and play."""


class ReunionError(Exception):
    """Base exception for engine failures."""


class DictionaryUnavailableError(ReunionError):
    """Raised when the lexicon is empty and no puzzle can be built."""

    user_message = "Cannot build a puzzle, check connectivity."


class SlotDerivationError(ReunionError):
    """Raised when a fillable cell is not reached by any slot."""


class GenerationExhaustedError(ReunionError):
    """Raised when the bounded search finds no consistent fill."""

    user_message = "Failed to generate a valid puzzle. Please try again."


class ValidationError(ReunionError):
    """Raised when a filled grid fails the integrity checks."""


class CorruptedStateError(ReunionError):
    """Raised when persisted session state cannot be decoded."""
