"""
Styling records shared by the slide renderer and the document builder.
"""
import logging
from dataclasses import dataclass
from typing import Optional

logger = logging.getLogger(__name__)

WHITE = '#ffffff'
CARD_FILL = '#f8fafc'
BAND_FILL = '#f0f9ff'
SHADOW_FILL = '#cbd5e1'


@dataclass
class TextStyle:
    """Font and paragraph settings for one text box or table cell"""
    font_face: Optional[str] = None
    font_size: int = 16
    color: str = '#000000'
    bold: bool = False
    italic: bool = False
    align: str = 'left'
    valign: str = 'top'


@dataclass
class CellStyle:
    """Fill and text settings for one table cell"""
    fill: str
    text: TextStyle


@dataclass(frozen=True)
class RenderStyle:
    """
    Visual density of rendered slides.

    ``decorated`` draws the ornamental circles, triangles and drop shadows
    around the content; ``flat`` keeps only the structural shapes (header
    bands, cards, bullets) and the content itself.
    """
    name: str
    decorations: bool
    shadows: bool


DECORATED = RenderStyle(name='decorated', decorations=True, shadows=True)
FLAT = RenderStyle(name='flat', decorations=False, shadows=False)

RENDER_STYLES = {style.name: style for style in (DECORATED, FLAT)}


def render_style(name: Optional[str]) -> RenderStyle:
    """Look up a render style by name; unknown names get the decorated style"""
    style = RENDER_STYLES.get((name or '').lower())
    if style is None:
        logger.warning("Unknown visual style %r, using %s", name, DECORATED.name)
        return DECORATED
    return style
