"""
Core module for the deck generator.
"""
from .generator import PowerPointGenerator, generate_pptx, generate_pptx_base64, export_filename
from .renderer import SlideRenderer, LAYOUT_RENDERERS
from .outline_parser import OutlineParser, parse_outline, validate_outline, slides_to_outline
from .importer import DeckImporter, ImportedDeck, import_presentation
from .image_handler import ImageHandler
from .ai_adapter import OutlineGenerator, GenerationRequest, GeneratedOutline, parse_outline_reply
from .config import Settings
from .styles import RenderStyle, DECORATED, FLAT, render_style

from .models import (
    SlideLayout, ElementType, SlideElement, Slide,
    Theme, ThemeColors, ThemeFonts, Presentation, generate_id
)

from .errors import (
    DeckForgeError, ValidationError, GenerationError, ServiceNotConfiguredError,
    PresentationImportError, RenderError
)

__all__ = [
    'PowerPointGenerator', 'generate_pptx', 'generate_pptx_base64', 'export_filename',
    'SlideRenderer', 'LAYOUT_RENDERERS',
    'OutlineParser', 'parse_outline', 'validate_outline', 'slides_to_outline',
    'DeckImporter', 'ImportedDeck', 'import_presentation',
    'ImageHandler',
    'OutlineGenerator', 'GenerationRequest', 'GeneratedOutline', 'parse_outline_reply',
    'Settings',
    'RenderStyle', 'DECORATED', 'FLAT', 'render_style',

    # Data classes
    'SlideLayout', 'ElementType', 'SlideElement', 'Slide',
    'Theme', 'ThemeColors', 'ThemeFonts', 'Presentation', 'generate_id',

    'DeckForgeError', 'ValidationError', 'GenerationError', 'ServiceNotConfiguredError',
    'PresentationImportError', 'RenderError',
]
