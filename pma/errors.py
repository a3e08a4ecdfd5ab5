"""Error taxonomy shared by the stages, the orchestrator and the guided session."""

SNIPPET_LENGTH = 200


class PMAError(RuntimeError):
    """Base class for every expected failure raised by PM Assist."""


class ConfigError(PMAError):
    """Missing or unusable configuration, e.g. no API key. Raised before any network call."""


class UpstreamError(PMAError):
    """The model call failed: network error, non-success status or provider exception."""


class ExtractionError(PMAError):
    """Model output did not contain parseable structured data.

    ``snippet`` carries the start of the offending text for diagnosis.
    """

    def __init__(self, message: str, snippet: str = ""):
        super().__init__(message)
        self.snippet = snippet[:SNIPPET_LENGTH]

    def __str__(self) -> str:
        message = super().__str__()
        if self.snippet:
            return f"{message} (output began: {self.snippet!r})"
        return message


class PlanFormatError(ExtractionError):
    """The refinement stage output could not be turned into a ProductPlan."""


class SessionStateError(PMAError):
    """A guided-session transition was requested from a state that does not accept it."""
