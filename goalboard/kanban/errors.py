"""Store errors raised for bad references in request bodies."""


class KanbanError(Exception):
    pass


class NotFoundError(KanbanError):
    """A board, column or goal named in a request does not exist."""


class InvalidReferenceError(KanbanError):
    """A reference exists but cannot be used, e.g. a column on another board."""
