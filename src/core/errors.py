"""
Error taxonomy for bracket generation.

Each error carries the HTTP-style status code the web layer answers with.
"""


class BracketError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BracketError):
    """Bad input, wrong tournament state, too few participants or unknown format."""
    status_code = 400


class NotFoundError(BracketError):
    status_code = 404


class PersistenceError(BracketError):
    """A read or write against the tournament store failed."""
    status_code = 500
