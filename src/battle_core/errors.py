class BattleError(Exception):
    """Base for every error raised by the battle core"""


class InvalidInputError(BattleError):
    """Malformed command or out-of-range selection. State is left untouched."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class PreconditionError(BattleError):
    """A well-formed request that is not allowed in the current battle state"""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class CollaboratorError(BattleError):
    """An external collaborator failed. The request's transaction is abandoned."""


class StorageError(CollaboratorError):
    pass


class NotFoundError(StorageError):
    """A storage lookup that expects a record found none"""

    def __init__(self, kind: str, key: str):
        super().__init__(f"no {kind} found for '{key}'")
        self.kind = kind
        self.key = key


class CatalogError(CollaboratorError):
    pass


class InvariantViolationError(BattleError):
    """State that cannot occur by construction, e.g. a battling trainer with no battle record"""
