"""Errors raised while fetching and extracting listing pages."""


class FetchError(Exception):
    """
    Raised when the listing page cannot be fetched.

    Covers non-2xx responses and transport failures (DNS, connect, read
    timeout). Fatal for the current scrape run only.
    """

    def __init__(self, url: str, message: str, status_code: int | None = None):
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class ExtractionError(Exception):
    """
    Raised when a single listing element cannot be turned into a candidate.

    Non-fatal: the extractor logs it, skips the element, and continues
    with the rest of the batch.
    """
