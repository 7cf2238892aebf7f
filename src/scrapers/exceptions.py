# src/scrapers/exceptions.py

"""Errors raised by the listing fetcher."""


class FetchFailure(Exception):
    """The marketplace could not be reached or returned an unusable payload.

    Raised only after the retry budget is spent. No report is built
    when this escapes the pipeline.
    """

    def __init__(
        self,
        message: str,
        url: str = "",
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code
