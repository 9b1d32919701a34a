"""Exception hierarchy for listengraph.

    ListenGraphError
    +-- ConfigurationError     invalid build parameters or config file
    +-- ListenSourceError      listening history could not be read
    +-- GenreResolutionError   genre lookup backend unreachable
    +-- GraphBuildError        assembled graph failed its consistency checks

The graph core raises ``ConfigurationError`` (and ``GraphBuildError`` if
its own output is inconsistent).  Errors from the listen source and genre
resolver pass through it unchanged.
"""


class ListenGraphError(Exception):
    """Base class carrying a ``message`` and the failing ``provider_name``.

    ``str(exc)`` prefixes the provider, e.g.
    ``[sqlite-listens] database is locked``.
    """

    default_message = "An unexpected error occurred"

    def __init__(self, message: str | None = None, provider_name: str | None = None) -> None:
        self._message = message or self.default_message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


class ConfigurationError(ListenGraphError):
    """Bad parameters or configuration; raised before any listens are read."""

    default_message = "Invalid or missing configuration"


class ListenSourceError(ListenGraphError):
    default_message = "Listen event source failed"


class GenreResolutionError(ListenGraphError):
    """A genre backend failed.  A plain miss is ``[]``, never this error."""

    default_message = "Genre lookup failed"


class GraphBuildError(ListenGraphError):
    default_message = "Artist network graph could not be built"
