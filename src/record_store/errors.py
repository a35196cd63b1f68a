"""Errors raised by record store implementations."""


class PersistenceError(Exception):
    """
    Raised when a record store operation fails.

    Persistence failures are fatal for the scrape run that triggered them:
    the scheduler catches them at the top of the run, records an error log
    entry, and keeps the timer alive.
    """

    def __init__(self, operation: str, message: str):
        super().__init__(f"{operation} failed: {message}")
        self.operation = operation
