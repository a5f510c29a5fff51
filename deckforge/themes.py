"""
Built-in themes and custom theme validation.
"""
import re
import time
import logging
from typing import Dict, Any, List, Optional

from .errors import ValidationError
from .image_handler import ImageHandler
from .models import Theme, ThemeColors, ThemeFonts, Presentation

logger = logging.getLogger(__name__)

DEFAULT_THEME = 'corporate'

HEX_COLOR = re.compile(r'^#?(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$')


def _theme(name: str, display_name: str, description: str,
           colors: Dict[str, str], heading: str, body: str) -> Theme:
    return Theme(
        name=name,
        display_name=display_name,
        description=description,
        colors=ThemeColors(**colors),
        fonts=ThemeFonts(heading=heading, body=body),
    )


_BUILTIN_THEMES = (
    _theme('corporate', 'Corporate', 'Professional blue and gray theme', {
        'primary': '#1e3a5f', 'secondary': '#4a6fa5', 'background': '#ffffff',
        'text': '#1a1a1a', 'accent': '#3b82f6', 'muted': '#6b7280',
    }, 'Arial', 'Arial'),
    _theme('minimal', 'Minimal', 'Clean black and white design', {
        'primary': '#000000', 'secondary': '#374151', 'background': '#ffffff',
        'text': '#111827', 'accent': '#6b7280', 'muted': '#9ca3af',
    }, 'Helvetica', 'Helvetica'),
    _theme('creative', 'Creative', 'Colorful and dynamic theme', {
        'primary': '#7c3aed', 'secondary': '#ec4899', 'background': '#faf5ff',
        'text': '#1f2937', 'accent': '#f59e0b', 'muted': '#6b7280',
    }, 'Georgia', 'Arial'),
    _theme('nature', 'Nature', 'Calming green and beige palette', {
        'primary': '#166534', 'secondary': '#4ade80', 'background': '#f5f5dc',
        'text': '#1a1a1a', 'accent': '#84cc16', 'muted': '#6b7280',
    }, 'Georgia', 'Arial'),
    _theme('tech', 'Tech', 'Modern gradient theme', {
        'primary': '#0ea5e9', 'secondary': '#8b5cf6', 'background': '#0f172a',
        'text': '#f8fafc', 'accent': '#22d3ee', 'muted': '#94a3b8',
    }, 'Arial', 'Arial'),
    _theme('academic', 'Academic', 'Scholarly and professional', {
        'primary': '#7c2d12', 'secondary': '#b45309', 'background': '#fffbeb',
        'text': '#1c1917', 'accent': '#d97706', 'muted': '#78716c',
    }, 'Times New Roman', 'Times New Roman'),
)

THEME_REGISTRY: Dict[str, Theme] = {theme.name: theme for theme in _BUILTIN_THEMES}


def resolve(identifier: Optional[str]) -> Theme:
    """Look up a built-in theme; unknown names get the corporate theme"""
    theme = THEME_REGISTRY.get(identifier or '')
    if theme is None:
        logger.info("Unknown theme %r, using %s", identifier, DEFAULT_THEME)
        return THEME_REGISTRY[DEFAULT_THEME]
    return theme


def list_all() -> List[Theme]:
    """Built-in themes in catalogue order"""
    return list(_BUILTIN_THEMES)


def resolve_for(presentation: Presentation) -> Theme:
    """The theme a presentation renders with: inline custom theme first, then its name"""
    if presentation.custom_theme is not None:
        return presentation.custom_theme
    return resolve(presentation.theme)


def validate_custom_theme(data: Any) -> Theme:
    """
    Check a user-supplied theme record and build a Theme from it

    Every problem is collected before failing, so the caller gets the full
    list in ``ValidationError.details``.

    Raises:
        ValidationError: if any colour or font role is missing or invalid
    """
    if not isinstance(data, dict):
        raise ValidationError("Custom theme must be an object",
                              [{'field': 'customTheme', 'message': 'expected an object'}])

    issues = []
    if not isinstance(data.get('name'), str) or not data.get('name'):
        issues.append({'field': 'name', 'message': 'required'})

    colors = data.get('colors')
    if not isinstance(colors, dict):
        issues.append({'field': 'colors', 'message': 'required'})
    else:
        for role in ThemeColors.ROLES:
            value = colors.get(role)
            if value is None:
                issues.append({'field': f'colors.{role}', 'message': 'required'})
            elif not isinstance(value, str) or not HEX_COLOR.match(value):
                issues.append({'field': f'colors.{role}', 'message': 'expected a hex colour'})

    fonts = data.get('fonts')
    if not isinstance(fonts, dict):
        issues.append({'field': 'fonts', 'message': 'required'})
    else:
        for role in ('heading', 'body'):
            value = fonts.get(role)
            if not isinstance(value, str) or not value.strip():
                issues.append({'field': f'fonts.{role}', 'message': 'required'})

    if issues:
        raise ValidationError("Invalid custom theme", issues)

    return Theme.from_data(data)


def create_custom_theme(display_name: str,
                        colors: Optional[Dict[str, str]] = None,
                        fonts: Optional[Dict[str, Any]] = None,
                        logo: Optional[str] = None,
                        image_handler: Optional[ImageHandler] = None) -> Theme:
    """
    Build a user theme named ``custom-<epoch millis>``

    Colours not given fall back to the corporate palette. When a logo is
    given without any colours, primary, secondary and accent are sampled
    from the logo itself.

    Raises:
        ValidationError: if the name is blank or the result is incomplete
    """
    if not display_name or not display_name.strip():
        raise ValidationError("Theme name is required",
                              [{'field': 'displayName', 'message': 'required'}])

    base = THEME_REGISTRY[DEFAULT_THEME]
    palette = base.colors.to_data()
    if colors:
        palette.update(colors)
    elif logo:
        handler = image_handler or ImageHandler()
        data = handler.load(logo)
        sampled = handler.sample_palette(data) if data else []
        if len(sampled) >= 2:
            palette['primary'] = sampled[0]
            palette['secondary'] = sampled[1]
            palette['accent'] = sampled[2] if len(sampled) > 2 else sampled[0]

    return validate_custom_theme({
        'name': f"custom-{int(time.time() * 1000)}",
        'displayName': display_name.strip(),
        'description': 'Custom theme',
        'colors': palette,
        'fonts': fonts or base.fonts.to_data(),
        'logo': logo,
    })
