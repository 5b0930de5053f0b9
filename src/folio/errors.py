"""Error types raised while resolving pages."""


class IntegrityError(Exception):
    """Page tree data is malformed (cyclic or dangling parent chain).

    Fatal for the current request only. Callers surface it as not found
    but log it separately for diagnostics.
    """
