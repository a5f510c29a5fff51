"""
This module contains the PowerPointGenerator class for creating presentations.
"""
import io
import re
import base64
import logging
from typing import Callable, List, Optional

from pptx import Presentation as PptxPresentation
from pptx.enum.shapes import MSO_SHAPE
from pptx.util import Inches, Pt, Emu
from pptx.dml.color import RGBColor
from pptx.enum import text as text_enum

from . import themes
from .errors import DeckForgeError, RenderError
from .geometry import BoundingBox, CANVAS_WIDTH, CANVAS_HEIGHT
from .image_handler import ImageHandler
from .models import Presentation
from .renderer import SlideRenderer
from .styles import CellStyle, TextStyle, RenderStyle, DECORATED

logger = logging.getLogger(__name__)

AUTHOR = 'deckforge'
EXPORT_EXTENSION = '.pptx'
BLANK_LAYOUT_INDEX = 6

# Characters lxml refuses in document properties
XML_ILLEGAL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")

# Builder shape names mapped to python-pptx autoshapes
SHAPE_REGISTRY = {
    'rect': MSO_SHAPE.RECTANGLE,
    'roundRect': MSO_SHAPE.ROUNDED_RECTANGLE,
    'ellipse': MSO_SHAPE.OVAL,
    'rtTriangle': MSO_SHAPE.RIGHT_TRIANGLE,
    'rightArrow': MSO_SHAPE.RIGHT_ARROW,
}

ALIGNMENTS = {
    'left': text_enum.PP_ALIGN.LEFT,
    'center': text_enum.PP_ALIGN.CENTER,
    'right': text_enum.PP_ALIGN.RIGHT,
}

ANCHORS = {
    'top': text_enum.MSO_ANCHOR.TOP,
    'middle': text_enum.MSO_ANCHOR.MIDDLE,
    'bottom': text_enum.MSO_ANCHOR.BOTTOM,
}


def hex_to_rgb(hex_color: str) -> RGBColor:
    """Convert a ``#rrggbb``, ``rrggbb`` or ``#rgb`` string to RGBColor"""
    hex_color = hex_color.lstrip('#')
    if len(hex_color) == 3:
        hex_color = ''.join(c * 2 for c in hex_color)
    return RGBColor.from_string(hex_color.upper())


def xml_safe(text: str) -> str:
    """Drop control characters that cannot appear in XML text"""
    return XML_ILLEGAL_CHARS.sub('', text or '')


def export_filename(title: str) -> str:
    """File name for an exported deck: every non-alphanumeric becomes ``_``"""
    return re.sub(r'[^a-zA-Z0-9]', '_', title or '') + EXPORT_EXTENSION


class PowerPointGenerator:
    """Builds a .pptx document from a presentation and its theme"""

    def __init__(self, slide_width_inches: float = CANVAS_WIDTH,
                 slide_height_inches: float = CANVAS_HEIGHT,
                 style: RenderStyle = DECORATED,
                 image_handler: Optional[ImageHandler] = None):
        """
        Initialize the PowerPoint generator

        Args:
            slide_width_inches: Width of the slide in inches
            slide_height_inches: Height of the slide in inches
            style: Visual density used by the slide renderer
            image_handler: Loader for logo and slide images
        """
        self.slide_width_inches = slide_width_inches
        self.slide_height_inches = slide_height_inches
        self.style = style
        self.image_handler = image_handler or ImageHandler()
        self.presentation = None
        self.slide = None

    def create_presentation(self, title: str = ''):
        """Create a new, empty presentation with 16:9 geometry and metadata"""
        self.presentation = PptxPresentation()

        self.presentation.slide_width = Inches(self.slide_width_inches)
        self.presentation.slide_height = Inches(self.slide_height_inches)

        properties = self.presentation.core_properties
        properties.title = xml_safe(title)
        properties.subject = xml_safe(title)
        properties.author = AUTHOR
        properties.last_modified_by = AUTHOR
        properties.revision = 1
        self.slide = None

    def add_slide(self, background: str):
        """Append a blank slide with a solid background colour"""
        blank_slide_layout = self.presentation.slide_layouts[BLANK_LAYOUT_INDEX]
        self.slide = self.presentation.slides.add_slide(blank_slide_layout)

        fill = self.slide.background.fill
        fill.solid()
        fill.fore_color.rgb = hex_to_rgb(background)
        return self.slide

    def add_shape(self, kind: str, box: BoundingBox, fill: str,
                  line_color: Optional[str] = None, line_width: float = 1.0,
                  radius: Optional[float] = None, rotation: float = 0.0):
        """
        Add a filled autoshape to the current slide

        Args:
            kind: Key of SHAPE_REGISTRY
            box: Position and size in inches
            fill: Hex fill colour
            line_color: Hex outline colour, no outline when None
            line_width: Outline width in points
            radius: Corner radius in inches, for rounded rectangles
            rotation: Clockwise rotation in degrees
        """
        shape = self.slide.shapes.add_shape(
            SHAPE_REGISTRY[kind],
            Inches(box.left), Inches(box.top), Inches(box.width), Inches(box.height)
        )
        shape.shadow.inherit = False

        shape.fill.solid()
        shape.fill.fore_color.rgb = hex_to_rgb(fill)

        if line_color:
            shape.line.color.rgb = hex_to_rgb(line_color)
            shape.line.width = Pt(line_width)
        else:
            shape.line.fill.background()

        if radius is not None and kind == 'roundRect':
            shortest = min(box.width, box.height)
            if shortest > 0:
                shape.adjustments[0] = min(radius / shortest, 0.5)

        if rotation:
            shape.rotation = rotation
        return shape

    def add_text_box(self, text: str, box: BoundingBox, style: TextStyle):
        """
        Add a text box to the current slide

        Each line of ``text`` becomes its own paragraph with the same styling.
        """
        text_box = self.slide.shapes.add_textbox(
            Inches(box.left), Inches(box.top), Inches(box.width), Inches(box.height)
        )
        text_frame = text_box.text_frame
        text_frame.word_wrap = True
        text_frame.margin_left = Inches(0.1)
        text_frame.margin_right = Inches(0.1)
        text_frame.margin_top = Inches(0.05)
        text_frame.margin_bottom = Inches(0.05)
        text_frame.vertical_anchor = ANCHORS.get(style.valign, text_enum.MSO_ANCHOR.TOP)

        text_frame.clear()
        for index, line in enumerate(text.split('\n')):
            paragraph = text_frame.paragraphs[0] if index == 0 else text_frame.add_paragraph()
            self._write_paragraph(paragraph, line, style)
        return text_box

    def _write_paragraph(self, paragraph, text: str, style: TextStyle):
        paragraph.alignment = ALIGNMENTS.get(style.align, text_enum.PP_ALIGN.LEFT)

        run = paragraph.add_run()
        run.text = text

        font = run.font
        if style.font_face:
            font.name = style.font_face
        font.size = Pt(style.font_size)
        font.color.rgb = hex_to_rgb(style.color)
        font.bold = style.bold
        font.italic = style.italic

    def add_image(self, data: bytes, box: BoundingBox):
        """
        Add an image to the current slide, fitted inside ``box`` with its aspect kept

        Unreadable images are logged and skipped.
        """
        info = self.image_handler.get_image_info(data)
        if info is None:
            logger.warning("Skipping unreadable image (%d bytes)", len(data))
            return None

        left, top, width, height = self.image_handler.contain_box(
            info[0], info[1], box.left, box.top, box.width, box.height
        )
        try:
            return self.slide.shapes.add_picture(
                io.BytesIO(data), Inches(left), Inches(top), Inches(width), Inches(height)
            )
        except Exception as e:  # pylint: disable=broad-exception-caught
            logger.error("Error adding image to slide: %s", str(e))
            return None

    def add_table(self, rows: List[List[str]], left: float, top: float, width: float,
                  row_height: float, cell_style: Callable[[int, int], CellStyle]):
        """
        Add a table to the current slide

        Args:
            rows: Cell text, row by row; every row must have the same length
            left, top, width: Table placement in inches
            row_height: Height of each row in inches
            cell_style: Called with (row index, column index) for each cell
        """
        num_rows = len(rows)
        num_cols = len(rows[0])

        graphic_frame = self.slide.shapes.add_table(
            num_rows, num_cols,
            Inches(left), Inches(top), Inches(width), Inches(row_height * num_rows)
        )
        table = graphic_frame.table
        table.horz_banding = False

        column_width = Emu(int(Inches(width) / num_cols))
        for col_idx in range(num_cols):
            table.columns[col_idx].width = column_width
        for row_idx in range(num_rows):
            table.rows[row_idx].height = Inches(row_height)

        for row_idx, row in enumerate(rows):
            for col_idx, cell_text in enumerate(row):
                style = cell_style(row_idx, col_idx)
                cell = table.cell(row_idx, col_idx)
                cell.fill.solid()
                cell.fill.fore_color.rgb = hex_to_rgb(style.fill)
                cell.vertical_anchor = ANCHORS.get(style.text.valign, text_enum.MSO_ANCHOR.MIDDLE)
                self._write_paragraph(cell.text_frame.paragraphs[0], cell_text, style.text)
        return table

    def set_notes(self, notes: str):
        """Write speaker notes for the current slide"""
        self.slide.notes_slide.notes_text_frame.text = notes

    def build(self, presentation: Presentation) -> PptxPresentation:
        """
        Render every slide of a presentation into a new document

        Args:
            presentation: The deck to render; it is not modified

        Returns:
            The python-pptx presentation object
        """
        theme = themes.resolve_for(presentation)

        logger.info("Generating presentation %r with theme %s (%s style)",
                    presentation.title, theme.name, self.style.name)

        self.create_presentation(presentation.title)
        renderer = SlideRenderer(self, theme, self.style)

        try:
            for slide_idx, slide in enumerate(presentation.slides):
                logger.info("Rendering slide %d of %d: %s (%s)", slide_idx + 1,
                            len(presentation.slides), slide.title or 'Untitled', slide.layout)
                renderer.render(slide)
                if slide.notes:
                    self.set_notes(slide.notes)
        except DeckForgeError:
            raise
        except (AttributeError, TypeError, ValueError, KeyError, IndexError) as e:
            raise RenderError(f"Failed to render slide: {e}") from e

        logger.info("Total slides created: %d", len(self.presentation.slides))
        return self.presentation

    def generate(self, presentation: Presentation) -> bytes:
        """Render a presentation and return the .pptx bytes"""
        self.build(presentation)
        buffer = io.BytesIO()
        self.presentation.save(buffer)
        return buffer.getvalue()

    def generate_base64(self, presentation: Presentation) -> str:
        """Render a presentation and return the .pptx as a base64 string"""
        return base64.b64encode(self.generate(presentation)).decode('ascii')


def generate_pptx(presentation: Presentation, style: RenderStyle = DECORATED) -> bytes:
    """Render a presentation with a fresh generator and return the .pptx bytes"""
    return PowerPointGenerator(style=style).generate(presentation)


def generate_pptx_base64(presentation: Presentation, style: RenderStyle = DECORATED) -> str:
    """Render a presentation with a fresh generator and return base64 text"""
    return PowerPointGenerator(style=style).generate_base64(presentation)
