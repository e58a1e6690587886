"""
Error types for the link store.

Every condition a caller can trigger is one of these classes, so call sites
(API routes, the merge worker) can handle them exhaustively.
"""


class ShortlinkError(Exception):
    """Base class for all link store errors"""


class AliasInUse(ShortlinkError):
    """An explicit alias was requested that already exists"""

    def __init__(self, alias: str):
        self.alias = alias
        super().__init__(f"Key '{alias}' already in use")


class NotFound(ShortlinkError):
    """No entry exists for the alias"""

    def __init__(self, alias: str):
        self.alias = alias
        super().__init__(f"Link '{alias}' not found")


class KeyspaceExhausted(ShortlinkError):
    """Every prefix of the link hash is taken by another link"""

    def __init__(self, link: str):
        self.link = link
        super().__init__(f"Could not derive a free key for '{link}'")


class PersistenceError(ShortlinkError):
    """Base class for link data file errors"""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{reason} ('{path}')")


class StoreIOError(PersistenceError):
    """Link data file could not be read or written"""


class StoreParseError(PersistenceError):
    """Link data file exists but is not a valid link table"""


class InvariantViolation(ShortlinkError):
    """
    The forward and reverse indices disagree.

    This is never caused by user input; it means the in-memory state is corrupt.
    """
