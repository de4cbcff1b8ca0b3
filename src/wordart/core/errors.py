from __future__ import annotations


class WordartError(Exception):
    """Base class for errors surfaced to callers of the deck pipeline."""


class GenerationError(WordartError):
    """The content-generation call failed or returned no payload."""


class MalformedPayloadError(GenerationError):
    """Generated payload is not well-formed JSON or does not match the schema.

    `errors` keeps the individual "$[...]: message" lines when available.
    """

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors: list[str] = list(errors or [])


class ExportError(WordartError):
    """Serializing a presentation to .pptx failed."""


class SessionBusyError(WordartError):
    """A generate/export call is already in flight on this session."""
