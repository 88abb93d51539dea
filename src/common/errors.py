"""Exception types shared across pipeline stages."""


class PulseError(Exception):
    """Base class for pipeline errors."""


class ConfigurationError(PulseError):
    """Required configuration or credentials are missing. Fatal for the invocation."""


class InsightExtractionError(PulseError):
    """The LLM service could not be reached or answered with an error status."""


class InvalidStatusTransition(PulseError):
    """A raw article status change that would move the state machine backwards."""

    def __init__(self, current, target) -> None:
        super().__init__(f"Invalid status transition: {current.value} -> {target.value}")
        self.current = current
        self.target = target


class FeedFetchError(PulseError):
    """A source feed could not be downloaded or parsed. The source is skipped."""
