"""Exceptions raised by the funnel and its backends."""


class CoachError(Exception):
    """Base class for all topical authority coach errors."""


class SessionBusyError(CoachError):
    """A generation call is already in flight for this session."""

    def __init__(self, session_id: str):
        super().__init__(f"Session {session_id} is busy")
        self.session_id = session_id


class SessionNotFoundError(CoachError):
    pass


class InvalidSelectionError(CoachError):
    """The selected item is not a member of the current collection."""

    def __init__(self, kind: str, item_id: str):
        super().__init__(f"Unknown {kind}: {item_id}")
        self.kind = kind
        self.item_id = item_id


class MissingTopicError(CoachError):
    pass


class InvalidTransitionError(CoachError):
    pass


class EmptyReplyError(CoachError):
    pass


class MissingCredentialError(CoachError):
    """No API key is configured for the selected provider."""


class BackendResponseError(CoachError):
    """The backend answered, but not with the expected shape."""
