"""Error types shared by the core and its adapters."""

from __future__ import annotations

from enum import Enum


class ConfigurationError(Exception):
    """Raised at startup when the configuration cannot be used."""


class DispatchFailure(str, Enum):
    NOT_FOUND = "not_found"
    WRONG_TYPE = "wrong_type"
    TRANSPORT = "transport"


_FAILURE_TEXT = {
    DispatchFailure.NOT_FOUND: "Destination channel was not found.",
    DispatchFailure.WRONG_TYPE: "Destination channel is not a text channel.",
    DispatchFailure.TRANSPORT: "Sending to the destination channel failed.",
}


class DispatchError(Exception):
    """A failure scoped to a single destination of a single redirect.

    Adapters raise it for transport failures; the dispatcher also builds it
    directly for lookup failures and returns it as part of a result value.
    """

    def __init__(
        self,
        reason: DispatchFailure,
        destination: str,
        source: str = "",
        detail: str = "",
    ) -> None:
        self.reason = reason
        self.destination = destination
        self.source = source
        self.detail = detail
        super().__init__(self._describe())

    def _describe(self) -> str:
        message = (
            f"Could not redirect from channel ID {self.source or '?'} to channel ID "
            f"{self.destination}: {_FAILURE_TEXT[self.reason]}"
        )
        if self.detail:
            message = f"{message} ({self.detail})"
        return message

    def for_source(self, source: str) -> "DispatchError":
        """Return a copy of this error annotated with the originating channel."""

        return DispatchError(self.reason, self.destination, source, self.detail)
