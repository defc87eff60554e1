"""Service-level exceptions mapped to HTTP outcomes by the API routes."""

from typing import Optional


class DocumentationNotFoundError(LookupError):
    """A domain, topic or the documentation root does not exist (404)."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(f"{message}: {path}" if path else message)
        self.path = path


class InvalidDocumentationError(ValueError):
    """A documentation file exists but is not a JSON object."""


class GenerationError(RuntimeError):
    """The model call failed or its output did not match the question schema."""
