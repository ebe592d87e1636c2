class FocusSessionError(Exception):
    """Base class for focus session failures"""


class NotFoundError(FocusSessionError):
    """No focus session exists for the given session key and category"""

    def __init__(self, session_key: str, category: str):
        self.session_key = session_key
        self.category = category
        super().__init__("Focus session not found")


class InvalidArgumentError(FocusSessionError):
    """A caller supplied value is outside its allowed range"""


class GenerationFailedError(FocusSessionError):
    """The text generation backend errored or returned nothing usable"""


class UnconfiguredError(FocusSessionError):
    """A required external dependency has no credentials"""


class StorageError(FocusSessionError):
    """A storage backend call failed"""
