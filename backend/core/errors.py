# core/errors.py


class ExpenseError(Exception):
    """Base for every error raised by the expense core."""


class ValidationError(ExpenseError):
    """Bad or missing input. The message names the rule that failed."""


class StorageError(ExpenseError):
    """The database driver failed (connectivity, corruption, bad SQL)."""


class DuplicateKeyError(StorageError):
    """Insert hit a UNIQUE / PRIMARY KEY constraint."""
