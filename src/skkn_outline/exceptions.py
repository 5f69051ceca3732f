"""Custom exceptions for skkn_outline."""


class SkknOutlineError(Exception):
    """Base exception for skkn_outline operations."""


class FetchError(SkknOutlineError):
    """Error while talking to a remote HTTP endpoint."""


class ExtractionServiceError(SkknOutlineError):
    """The structure extraction service could not produce a proposal."""


class MissingApiKeyError(ExtractionServiceError):
    """No API key is configured for the structure extraction service."""


class ParseError(SkknOutlineError):
    """Error while parsing a service response."""


class DocumentLoadError(SkknOutlineError):
    """Error while reading a source document into text."""
