"""Exceptions raised by the phrase similarity engine."""


class InvalidInputError(TypeError):
    """Raised when a core function receives something other than a string."""

    def __init__(self, message: str, argument: str, value: object) -> None:
        super().__init__(message)
        self.argument = argument
        self.value = value


class DegenerateAggregationError(ValueError):
    """Raised in strict mode when a phrase has no tokens left to compare."""

    def __init__(self, message: str, phrase: str) -> None:
        super().__init__(message)
        self.phrase = phrase


class DictionaryError(ValueError):
    """Raised when a dictionaries file is malformed."""


def ensure_text(value: object, argument: str) -> str:
    """Return ``value`` unchanged if it is a string, raise otherwise."""
    if not isinstance(value, str):
        raise InvalidInputError(
            f"{argument} must be a string, got {type(value).__name__}",
            argument=argument,
            value=value,
        )
    return value
