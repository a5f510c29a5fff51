"""
Error types raised across the deck pipeline.

Every error that crosses the service boundary is turned into the same
``{"success": false, "error": ..., "details": ...}`` envelope by
``deckforge.service``.
"""
from typing import Any, Optional


class DeckForgeError(Exception):
    """Base class for all deckforge errors"""

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(DeckForgeError):
    """Malformed caller input: request shape, custom theme, file extension"""


class GenerationError(DeckForgeError):
    """The text-generation service returned nothing usable"""


class ServiceNotConfiguredError(GenerationError):
    """Credentials for the text-generation service are missing or rejected"""


class PresentationImportError(DeckForgeError):
    """An uploaded presentation could not be read"""


class RenderError(DeckForgeError):
    """
    Raised by the renderer or builder.

    Structurally valid slides never produce this; seeing it means an
    upstream model invariant was broken.
    """
