"""
Layout-specific drawing of slides.

``SlideRenderer.render`` turns one abstract slide into positioned shapes,
text boxes, images and tables on the builder's current document. Every
layout reads a fixed slice of the slide's elements and silently drops the
rest, except the bullet layout which shows a ``+N more`` line. All
coordinates are inches on the 10 x 5.625 canvas.
"""
import logging
from typing import List, Optional

from .errors import RenderError
from .geometry import (
    BoundingBox, CANVAS_HEIGHT, centered_row, split_columns, full_height, full_width
)
from .models import Slide, SlideElement, SlideLayout, ElementType, Theme
from .records import StatRecord, CardRecord, StepRecord, ComparisonColumn, TableRow
from .styles import (
    TextStyle, CellStyle, RenderStyle, DECORATED, WHITE, CARD_FILL, BAND_FILL, SHADOW_FILL
)

logger = logging.getLogger(__name__)

MAX_BULLETS = 6
BULLETS_BEFORE_INDICATOR = 5
MAX_SIDE_BULLETS = 5
MAX_STATS = 4
MAX_CARDS = 3
MAX_TIMELINE_STEPS = 5
MAX_COMPARISON_COLUMNS = 3
MAX_COMPARISON_FEATURES = 5

TEXT_TYPES = (ElementType.BULLET, ElementType.TEXT)
QUOTE_TYPES = (ElementType.QUOTE, ElementType.TEXT)

LOGO_POSITIONS = {
    'top-right': BoundingBox(8.5, 0.2, 1.0, 0.5),
    'top-left': BoundingBox(0.3, 0.2, 1.0, 0.5),
    'title': BoundingBox(0.5, 0.5, 2.0, 1.0),
    'section': BoundingBox(4.0, 0.5, 2.0, 0.8),
}

QUOTE_GLYPH = '“'
CHECK_MARK = '✓'
CAMERA = '\U0001f4f7'


class SlideRenderer:  # pylint: disable=too-many-public-methods
    """Draws slides with one theme onto a PowerPointGenerator-style builder"""

    def __init__(self, builder, theme: Theme, style: RenderStyle = DECORATED):
        self.builder = builder
        self.theme = theme
        self.style = style
        self._logo: Optional[bytes] = None
        self._logo_loaded = False

    def render(self, slide: Slide):
        """Add exactly one page for ``slide``; unknown layouts draw as title-content"""
        layout = getattr(slide.layout, 'value', slide.layout)
        method_name = LAYOUT_RENDERERS.get(layout)
        if method_name is None:
            logger.warning("Unknown layout %r on slide %s, drawing as %s",
                           layout, slide.id, SlideLayout.TITLE_CONTENT.value)
            method_name = LAYOUT_RENDERERS[SlideLayout.TITLE_CONTENT.value]
        getattr(self, method_name)(slide)

    # -- drawing helpers ---------------------------------------------------

    @property
    def colors(self):
        return self.theme.colors

    def _page(self, background: Optional[str] = None):
        self.builder.add_slide(background or self.colors.background)

    def _shape(self, kind: str, box: BoundingBox, fill: str, **options):
        self.builder.add_shape(kind, box, fill, **options)

    def _decoration(self, kind: str, box: BoundingBox, fill: str, **options):
        """Ornament only drawn in the decorated style"""
        if self.style.decorations:
            self._shape(kind, box, fill, **options)

    def _shadow(self, kind: str, box: BoundingBox, radius: Optional[float] = None):
        if self.style.shadows:
            self._shape(kind, box, SHADOW_FILL, radius=radius)

    def _text(self, text: str, box: BoundingBox, size: int, heading: bool = False,
              color: Optional[str] = None, bold: bool = False, italic: bool = False,
              align: str = 'left', valign: str = 'top'):
        fonts = self.theme.fonts
        if heading and fonts.heading_uppercase:
            text = text.upper()
        self.builder.add_text_box(text, box, TextStyle(
            font_face=fonts.heading if heading else fonts.body,
            font_size=size,
            color=color or self.colors.text,
            bold=bold,
            italic=italic,
            align=align,
            valign=valign,
        ))

    def _title(self, slide: Slide, box: BoundingBox, size: int,
               color: Optional[str] = None, align: str = 'left', valign: str = 'top') -> bool:
        if not slide.title:
            return False
        self._text(slide.title, box, size, heading=True, color=color or self.colors.primary,
                   bold=True, align=align, valign=valign)
        return True

    def _underline(self, left: float, top: float, width: float, height: float = 0.06):
        self._shape('rect', BoundingBox(left, top, width, height), self.colors.accent)

    def _logo_data(self) -> Optional[bytes]:
        if not self._logo_loaded:
            self._logo_loaded = True
            if self.theme.logo:
                self._logo = self.builder.image_handler.load(self.theme.logo)
                if self._logo is None:
                    logger.warning("Logo of theme %s could not be loaded, omitting it",
                                   self.theme.name)
        return self._logo

    def _add_logo(self, position: str = 'top-right'):
        data = self._logo_data()
        if data:
            self.builder.add_image(data, LOGO_POSITIONS[position])

    @staticmethod
    def _of_types(slide: Slide, types) -> List[SlideElement]:
        return [element for element in slide.renderable_elements() if element.type in types]

    def _bullet_rows(self, items: List[SlideElement], dot_left: float, text_left: float,
                     text_width: float, top: float, step: float, text_height: float,
                     dot_size: float, dot_offset: float, font_size: int):
        for index, item in enumerate(items):
            y = top + index * step
            self._shape('ellipse', BoundingBox(dot_left, y + dot_offset, dot_size, dot_size),
                        self.colors.accent)
            self._text(item.content, BoundingBox(text_left, y, text_width, text_height),
                       font_size, valign='middle')

    # -- layouts -----------------------------------------------------------

    def _render_title(self, slide: Slide):
        self._page()

        self._shape('rect', full_height(0, 3.5), self.colors.primary)
        self._decoration('ellipse', BoundingBox(2.5, 3.5, 2, 2), self.colors.accent)
        self._add_logo('title')

        self._title(slide, BoundingBox(4, 1.5, 5.5, 1.5), 40, valign='middle')
        if slide.subtitle:
            self._text(slide.subtitle, BoundingBox(4, 3.2, 5.5, 0.8), 20)

        self._underline(4, 3, 1.5, 0.08)

    def _render_title_content(self, slide: Slide):
        self._page()

        self._shape('rect', full_height(0, 0.12), self.colors.primary)
        self._decoration('ellipse', BoundingBox(8.5, -0.8, 2, 2), self.colors.accent)
        self._shape('rect', full_width(5.35, 0.275), self.colors.secondary)
        self._add_logo()

        if self._title(slide, BoundingBox(0.5, 0.3, 8, 0.8), 30):
            self._underline(0.5, 1.1, 1.5)

        self._shape('roundRect', BoundingBox(0.4, 1.35, 9.2, 3.7), CARD_FILL,
                    line_color=self.colors.muted, line_width=1, radius=0.1)

        content = '\n\n'.join(e.content for e in self._of_types(slide, (ElementType.TEXT,)))
        if content:
            self._text(content, BoundingBox(0.6, 1.5, 8.8, 3.4), 16)

    def _render_title_bullets(self, slide: Slide):
        self._page()

        self._shape('rect', full_height(0, 0.15), self.colors.primary)
        self._shape('rect', full_width(0, 1.2), self.colors.primary)
        self._add_logo()

        self._title(slide, BoundingBox(0.5, 0.3, 8, 0.7), 28, color=WHITE)

        items = self._of_types(slide, TEXT_TYPES)
        hidden = 0
        if len(items) > MAX_BULLETS:
            hidden = len(items) - BULLETS_BEFORE_INDICATOR
            items = items[:BULLETS_BEFORE_INDICATOR]

        self._bullet_rows(items, dot_left=0.5, text_left=0.9, text_width=8.5, top=1.5,
                          step=0.65, text_height=0.5, dot_size=0.25, dot_offset=0.08,
                          font_size=16)

        if hidden:
            self._text(f"+{hidden} more", BoundingBox(0.9, 1.5 + len(items) * 0.65, 8.5, 0.4),
                       14, color=self.colors.muted, italic=True, valign='middle')

    def _render_two_columns(self, slide: Slide):
        self._page()

        self._shape('rect', full_width(0, 0.1), self.colors.primary)
        self._add_logo()

        if self._title(slide, BoundingBox(0.5, 0.3, 9, 0.7), 28, align='center'):
            self._underline(4, 1, 2)

        left_items, right_items = split_columns(self._of_types(slide, TEXT_TYPES))
        for column_left, column_color, items in ((0.4, self.colors.primary, left_items),
                                                 (5.2, self.colors.secondary, right_items)):
            self._shape('roundRect', BoundingBox(column_left, 1.3, 4.4, 3.8), CARD_FILL,
                        line_color=column_color, line_width=2, radius=0.1)
            self._shape('rect', BoundingBox(column_left, 1.3, 4.4, 0.5), column_color)
            self._bullet_rows(items, dot_left=column_left + 0.2, text_left=column_left + 0.5,
                              text_width=3.7, top=2, step=0.55, text_height=0.45,
                              dot_size=0.18, dot_offset=0.05, font_size=13)

    def _image_panel(self, slide: Slide, left: float):
        """Image block: the slide's first image element, or a placeholder"""
        panel = BoundingBox(left, 0.5, 3.8, 4.5)
        self._shadow('roundRect', panel.offset(0.08, 0.08), radius=0.15)
        self._shape('roundRect', panel, CARD_FILL, radius=0.15)

        images = self._of_types(slide, (ElementType.IMAGE,))
        if images:
            data = self.builder.image_handler.load(images[0].content)
            if data and self.builder.add_image(data, panel.inset(0.1, 0.1)) is not None:
                return

        self._text(CAMERA, BoundingBox(left, 2.2, 3.8, 1), 48, align='center')
        self._text('Image', BoundingBox(left, 3, 3.8, 0.5), 14, color=self.colors.muted,
                   align='center')

    def _render_image_left(self, slide: Slide):
        self._page()

        self._shape('rect', full_height(0, 4.5), self.colors.primary)
        self._decoration('ellipse', BoundingBox(3, 3.5, 2.5, 2.5), self.colors.accent)
        self._image_panel(slide, 0.3)
        self._add_logo()

        if self._title(slide, BoundingBox(4.8, 0.5, 4.8, 0.8), 26):
            self._underline(4.8, 1.3, 1.2)

        items = self._of_types(slide, TEXT_TYPES)[:MAX_SIDE_BULLETS]
        self._bullet_rows(items, dot_left=4.8, text_left=5.15, text_width=4.4, top=1.6,
                          step=0.7, text_height=0.6, dot_size=0.22, dot_offset=0.12,
                          font_size=14)

    def _render_image_right(self, slide: Slide):
        self._page()

        self._shape('rect', full_height(5.5, 4.5), self.colors.primary)
        self._decoration('ellipse', BoundingBox(4.5, -0.5, 2.5, 2.5), self.colors.accent)
        self._shape('rect', BoundingBox(0, 5.2, 5.5, 0.425), self.colors.secondary)
        self._add_logo('top-left')

        if self._title(slide, BoundingBox(0.5, 0.5, 4.6, 0.8), 26):
            self._underline(0.5, 1.3, 1.2)

        items = self._of_types(slide, TEXT_TYPES)[:MAX_SIDE_BULLETS]
        self._bullet_rows(items, dot_left=0.5, text_left=0.85, text_width=4.3, top=1.6,
                          step=0.7, text_height=0.6, dot_size=0.22, dot_offset=0.12,
                          font_size=14)

        self._image_panel(slide, 5.9)

    def _render_quote(self, slide: Slide):
        self._page()

        self._decoration('ellipse', BoundingBox(-2, 1, 4, 4), self.colors.primary)
        self._decoration('ellipse', BoundingBox(8, -0.5, 2, 2), self.colors.accent)
        self._shape('rect', full_width(5.2, 0.425), self.colors.secondary)
        self._add_logo()

        quotes = self._of_types(slide, QUOTE_TYPES)
        if not quotes:
            return
        quote = quotes[0]

        card = BoundingBox(1.5, 1.2, 7, 3.2)
        self._shadow('roundRect', card.offset(0.08, 0.08), radius=0.2)
        self._shape('roundRect', card, WHITE, radius=0.2)
        self._shape('rect', BoundingBox(1.5, 1.2, 0.15, 3.2), self.colors.accent)

        self._text(QUOTE_GLYPH, BoundingBox(1.8, 1.1, 1, 1.2), 80, heading=True,
                   color=self.colors.accent)
        self._text(quote.content, BoundingBox(2, 1.8, 6, 1.8), 22, heading=True,
                   color=self.colors.primary, italic=True, align='center', valign='middle')

        attribution = quote.sub_content or slide.subtitle
        if attribution:
            self._underline(4, 3.7, 2, 0.04)
            self._text(f"— {attribution}", BoundingBox(2, 3.85, 6, 0.5), 16,
                       color=self.colors.secondary, bold=True, align='center')

    def _render_section(self, slide: Slide):
        self._page(self.colors.primary)

        self._decoration('ellipse', BoundingBox(6.5, -1, 5, 5), self.colors.secondary)
        self._decoration('ellipse', BoundingBox(-1, 4, 3, 3), self.colors.accent)
        self._decoration('rtTriangle', BoundingBox(0, 0, 2, 2), self.colors.accent, rotation=180)
        self._decoration('rect', BoundingBox(2, 2.6, 6, 0.08), WHITE)
        self._add_logo('section')
        self._decoration('ellipse', BoundingBox(4.5, 1.5, 1, 1), WHITE)

        self._title(slide, BoundingBox(0.5, 2.8, 9, 1.2), 44, color=WHITE,
                    align='center', valign='middle')
        self._shape('rect', BoundingBox(3.5, 4, 3, 0.08), WHITE)

        if slide.subtitle:
            self._text(slide.subtitle, BoundingBox(0.5, 4.2, 9, 0.8), 18, color=WHITE,
                       align='center', valign='middle')

    def _render_stats(self, slide: Slide):
        self._page(self.colors.primary)

        self._decoration('ellipse', BoundingBox(-1, -1, 3, 3), self.colors.secondary)
        self._decoration('ellipse', BoundingBox(8.5, 4, 2.5, 2.5), self.colors.accent)

        self._title(slide, BoundingBox(0.5, 0.4, 9, 0.7), 28, color=WHITE, align='center')

        stats = [StatRecord.from_content(e.content)
                 for e in slide.renderable_elements()[:MAX_STATS]]
        card_width = 2.1
        for left, stat in zip(centered_row(len(stats), card_width, 0.3), stats):
            card = BoundingBox(left, 1.5, card_width, 3.2)
            self._shadow('roundRect', card.offset(0.05, 0.05), radius=0.15)
            self._shape('roundRect', card, WHITE, radius=0.15)
            self._shape('ellipse', BoundingBox(left + (card_width - 0.6) / 2, 1.7, 0.6, 0.6),
                        self.colors.accent)

            self._text(stat.value, BoundingBox(left, 2.5, card_width, 1), 36, heading=True,
                       color=self.colors.primary, bold=True, align='center', valign='middle')
            self._shape('rect', BoundingBox(left + 0.4, 3.5, card_width - 0.8, 0.03),
                        self.colors.accent)
            if stat.label:
                self._text(stat.label, BoundingBox(left, 3.7, card_width, 0.9), 12,
                           align='center')

    def _render_cards(self, slide: Slide):
        self._page()

        self._shape('rect', full_width(0, 1.1), self.colors.primary)
        self._decoration('ellipse', BoundingBox(8.5, -0.5, 2, 2), self.colors.accent)
        self._add_logo()

        self._title(slide, BoundingBox(0.5, 0.3, 8, 0.6), 26, color=WHITE)

        cards = [CardRecord.from_content(e.content)
                 for e in slide.renderable_elements()[:MAX_CARDS]]
        palette = (self.colors.primary, self.colors.secondary, self.colors.accent)
        card_width = 2.8
        lefts = centered_row(len(cards), card_width, 0.5)

        for index, (left, card) in enumerate(zip(lefts, cards)):
            color = palette[index % len(palette)]
            box = BoundingBox(left, 1.4, card_width, 3.6)
            self._shadow('roundRect', box.offset(0.08, 0.08), radius=0.15)
            self._shape('roundRect', box, WHITE, radius=0.15)
            self._shape('rect', BoundingBox(left, 1.4, card_width, 0.15), color)

            badge = BoundingBox(left + (card_width - 0.9) / 2, 1.7, 0.9, 0.9)
            self._shape('ellipse', badge, color)
            self._text(str(index + 1), badge, 24, heading=True, color=WHITE, bold=True,
                       align='center', valign='middle')

            if card.heading:
                self._shape('rect', BoundingBox(left + 0.6, 2.75, card_width - 1.2, 0.04), color)
                self._text(card.heading, BoundingBox(left, 2.9, card_width, 0.6), 14,
                           heading=True, color=self.colors.primary, bold=True, align='center')
                if card.body:
                    self._text(card.body, BoundingBox(left + 0.2, 3.5, card_width - 0.4, 1.3),
                               11, align='center')
            else:
                self._text(card.body, BoundingBox(left + 0.2, 2.9, card_width - 0.4, 1.9),
                           12, align='center')

    def _render_timeline(self, slide: Slide):
        self._page()

        self._shape('rect', full_height(0, 0.12), self.colors.primary)
        self._shape('rect', full_width(5.2, 0.425), self.colors.accent)
        self._add_logo()

        if self._title(slide, BoundingBox(0.5, 0.3, 9, 0.7), 28, align='center'):
            self._underline(4, 1, 2)

        steps = [StepRecord.from_content(e.content)
                 for e in slide.renderable_elements()[:MAX_TIMELINE_STEPS]]
        if not steps:
            return

        track_left, track_width = 0.8, 8.4
        item_width = track_width / len(steps)
        palette = (self.colors.primary, self.colors.secondary, self.colors.accent)

        self._shape('rect', BoundingBox(track_left, 2.4, track_width, 0.12), self.colors.primary)

        for index, step in enumerate(steps):
            center = track_left + index * item_width + item_width / 2
            color = palette[index % len(palette)]

            if index < len(steps) - 1:
                self._shape('rightArrow', BoundingBox(center + 0.3, 2.35, 0.5, 0.22),
                            self.colors.accent)

            marker = BoundingBox(center - 0.35, 2.15, 0.6, 0.6)
            self._shadow('ellipse', marker.offset(0.03, 0.03))
            self._shape('ellipse', marker, color)
            self._text(str(index + 1), marker, 18, heading=True, color=WHITE, bold=True,
                       align='center', valign='middle')

            card_left = center - item_width / 2 + 0.1
            card_width = item_width - 0.2
            self._shape('roundRect', BoundingBox(card_left, 2.95, card_width, 2), CARD_FILL,
                        line_color=color, line_width=2, radius=0.1)
            self._shape('rect', BoundingBox(card_left, 2.95, card_width, 0.08), color)

            self._text(step.step, BoundingBox(card_left, 3.1, card_width, 0.5), 11,
                       heading=True, color=self.colors.primary, bold=True, align='center')
            if step.description:
                self._text(step.description,
                           BoundingBox(card_left + 0.05, 3.55, card_width - 0.1, 1.2), 9,
                           align='center')

    def _render_comparison(self, slide: Slide):
        self._page()

        self._shape('rect', full_width(0, 1.1), self.colors.primary)
        self._decoration('ellipse', BoundingBox(-0.5, -0.5, 1.5, 1.5), self.colors.secondary)
        self._decoration('ellipse', BoundingBox(9, 0.4, 1.2, 1.2), self.colors.accent)
        self._add_logo()

        self._title(slide, BoundingBox(0.5, 0.3, 8, 0.6), 26, color=WHITE)

        columns = [ComparisonColumn.from_content(e.content)
                   for e in slide.renderable_elements()[:MAX_COMPARISON_COLUMNS]]
        column_width = 4.2 if len(columns) == 2 else 2.9
        palette = (self.colors.primary, self.colors.secondary, self.colors.accent)

        for index, (left, column) in enumerate(zip(centered_row(len(columns), column_width, 0.4),
                                                   columns)):
            color = palette[index % len(palette)]
            box = BoundingBox(left, 1.3, column_width, 3.9)
            self._shadow('roundRect', box.offset(0.06, 0.06), radius=0.12)
            self._shape('roundRect', box, WHITE, radius=0.12)
            self._shape('roundRect', BoundingBox(left, 1.3, column_width, 0.8), color, radius=0.12)
            self._shape('rect', BoundingBox(left, 1.8, column_width, 0.3), color)

            self._shape('ellipse', BoundingBox(left + (column_width - 0.5) / 2, 1.4, 0.5, 0.5),
                        WHITE)
            self._text(column.title, BoundingBox(left, 1.95, column_width, 0.35), 14,
                       heading=True, color=WHITE, bold=True, align='center', valign='middle')
            self._shape('rect', BoundingBox(left + 0.4, 2.4, column_width - 0.8, 0.04), color)

            for row, feature in enumerate(column.features[:MAX_COMPARISON_FEATURES]):
                y = 2.6 + row * 0.5
                self._shape('ellipse', BoundingBox(left + 0.2, y + 0.08, 0.22, 0.22), color)
                self._text(CHECK_MARK, BoundingBox(left + 0.2, y + 0.02, 0.22, 0.3), 10,
                           color=WHITE, align='center')
                self._text(feature, BoundingBox(left + 0.5, y, column_width - 0.7, 0.45), 11,
                           valign='middle')

    def _table_cell_style(self, row: int, column: int) -> CellStyle:
        fonts = self.theme.fonts
        if row == 0:
            return CellStyle(fill=self.colors.primary, text=TextStyle(
                font_face=fonts.heading, font_size=13, color=WHITE, bold=True,
                align='center', valign='middle'))
        return CellStyle(fill=BAND_FILL if row % 2 == 0 else WHITE, text=TextStyle(
            font_face=fonts.body, font_size=11, color=self.colors.text, bold=column == 0,
            align='center', valign='middle'))

    def _render_table(self, slide: Slide):
        self._page()

        self._shape('rect', full_height(0, 0.12), self.colors.accent)
        self._decoration('ellipse', BoundingBox(8.5, -0.5, 2, 2), self.colors.primary)
        self._add_logo()

        if self._title(slide, BoundingBox(0.5, 0.3, 8, 0.7), 28):
            self._underline(0.5, 1, 1.5)

        rows = [TableRow.from_content(e.content) for e in slide.renderable_elements()]
        if rows:
            width = len(rows[0].cells)
            cells = [row.cells_for(width) for row in rows]
            row_height = 0.55

            self._shadow('roundRect', BoundingBox(0.48, 1.28, 9.1, len(cells) * row_height + 0.1),
                         radius=0.08)
            self.builder.add_table(cells, 0.5, 1.25, 9, row_height, self._table_cell_style)
            self._underline(0.5, 1.78, 9, 0.04)

        self._shape('rect', full_width(CANVAS_HEIGHT - 0.275, 0.275), self.colors.secondary)


# Layout identifier -> SlideRenderer method; must cover every SlideLayout
LAYOUT_RENDERERS = {
    SlideLayout.TITLE.value: '_render_title',
    SlideLayout.TITLE_CONTENT.value: '_render_title_content',
    SlideLayout.TITLE_BULLETS.value: '_render_title_bullets',
    SlideLayout.TWO_COLUMNS.value: '_render_two_columns',
    SlideLayout.IMAGE_LEFT.value: '_render_image_left',
    SlideLayout.IMAGE_RIGHT.value: '_render_image_right',
    SlideLayout.QUOTE.value: '_render_quote',
    SlideLayout.SECTION.value: '_render_section',
    SlideLayout.STATS.value: '_render_stats',
    SlideLayout.CARDS.value: '_render_cards',
    SlideLayout.TIMELINE.value: '_render_timeline',
    SlideLayout.COMPARISON.value: '_render_comparison',
    SlideLayout.TABLE.value: '_render_table',
}


def missing_layouts() -> List[str]:
    """Layouts without a drawing method"""
    return [layout.value for layout in SlideLayout
            if not hasattr(SlideRenderer, LAYOUT_RENDERERS.get(layout.value, ''))]


if missing_layouts():
    raise RenderError(f"No renderer for layouts: {', '.join(missing_layouts())}")
