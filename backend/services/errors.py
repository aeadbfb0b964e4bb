"""Error taxonomy for the matching pipeline.

Only the document extractor, the semantic analyzer and the weight loader
raise. The keyword path is pure string processing and never does.
"""


class ResumeMatchError(RuntimeError):
    """Base class; ``code`` is a stable machine-readable identifier."""

    default_code = "resume_match_error"

    def __init__(self, message: str, *, code: str | None = None):
        super().__init__(message)
        self.code = code or self.default_code


class ExtractionError(ResumeMatchError):
    """The uploaded document could not be turned into text."""

    default_code = "extraction_failed"


class UnsupportedFormatError(ExtractionError):
    default_code = "unsupported_format"


class EmptyDocumentError(ExtractionError):
    default_code = "empty_document"


class AnalysisServiceError(ResumeMatchError):
    """The semantic analyzer was unreachable or returned nothing usable."""

    default_code = "service_unavailable"


class AnalysisTimeoutError(AnalysisServiceError):
    default_code = "timeout"


class MalformedResponseError(AnalysisServiceError):
    default_code = "malformed_response"


class ConfigInvariantError(ResumeMatchError):
    """A weight table violates its invariants. Fatal at startup."""

    default_code = "config_invariant"
