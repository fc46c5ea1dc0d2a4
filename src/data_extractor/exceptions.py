"""
Exceptions module for data_extractor.

Every error raised by the extraction engine derives from DataExtractorError
and propagates unhandled to the caller of DataExtractor.extract_from().
"""

from typing import Optional


class DataExtractorError(Exception):
    """Base class for extraction errors."""


class ElementNotFound(DataExtractorError):
    """A required selector matched no element in the current scope."""

    def __init__(self, selector: Optional[str]):
        self.selector = selector
        super().__init__(f'Element matching "{selector}" could not be found.')


class NoCaseMatched(DataExtractorError):
    """A switch node ran out of cases."""

    def __init__(self, selectors=None):
        self.selectors = list(selectors or [])
        tried = ", ".join(f'"{s}"' for s in self.selectors)
        super().__init__(f"No switch case matched (tried: {tried}).")


class InvalidSchema(DataExtractorError, TypeError):
    """A schema node is malformed; detected when the walk reaches it."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class MissingSchema(DataExtractorError, TypeError):
    """DataExtractor was created without a schema."""

    def __init__(self):
        super().__init__("DataExtractor requires a schema.")
