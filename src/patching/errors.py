"""Exceptions raised while generating, persisting and applying patches."""


class PatchEngineError(Exception):
    """Base exception for patch operations."""

    pass


class InputUnreadableError(PatchEngineError):
    """Source or target text could not be read or decoded."""

    pass


class PersistFailureError(PatchEngineError):
    """Writing the patch artifact failed."""

    pass


class PatchFormatError(PatchEngineError):
    """Patch text is not a well-formed unified diff."""

    pass


class PatchApplyError(PatchEngineError):
    """Patch does not match the text it is applied to."""

    pass


class HashMismatchError(PatchApplyError):
    """Source text does not match the expected fingerprint."""

    def __init__(self, expected: str, actual: str):
        super().__init__(f"Source hash mismatch. Expected: {expected}, Actual: {actual}")
        self.expected = expected
        self.actual = actual


class ConfigurationError(PatchEngineError, ValueError):
    """Engine settings are missing, malformed or out of range."""

    pass
