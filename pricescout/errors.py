# pricescout/errors.py

"""Error taxonomy shared by the browser, extractors and aggregator."""


class InvalidRequest(ValueError):
    """The search request is malformed (e.g. empty query)."""


class ExtractionFailure(RuntimeError):
    """A single platform extraction failed; always recovered locally."""

    def __init__(self, platform: str, query: str, reason: str) -> None:
        super().__init__(
            f"{platform} extraction failed for '{query}': {reason}"
        )
        self.platform = platform
        self.query = query


class BrowserLaunchFailure(RuntimeError):
    """The shared headless browser could not be started."""
