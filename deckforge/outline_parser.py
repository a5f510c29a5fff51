"""
Parser for outline text: headings, bullets and quotes turned into slides.

Grammar, one construct per line:

    # Title               title slide
    ## Heading            new slide (``Section:`` or ``---`` prefix: section slide)
    ### Subtitle          subtitle of the current slide
    > text                quote text (``> - Author`` / ``> — Author`` is the attribution)
    - item / * item / 1. item
                          bullet
    anything else         free text, unless it starts with ``#``
"""
import re
from dataclasses import dataclass, field
from typing import List, Optional

from .models import Slide, SlideElement, SlideLayout, ElementType, generate_id

MAX_SECTIONS = 50
TWO_COLUMN_THRESHOLD = 8

SECTION_PREFIX = re.compile(r'^(?:section:|---)\s*', re.IGNORECASE)
NUMBERED_ITEM = re.compile(r'^\d+\.\s')
TITLE_HEADING = re.compile(r'^#\s+.+', re.MULTILINE)
ATTRIBUTION_MARKERS = ('—', '-')


@dataclass
class OutlineSection:
    """Accumulator for one slide while scanning"""
    title: str
    subtitle: Optional[str] = None
    content: List[str] = field(default_factory=list)
    is_quote: bool = False
    is_section: bool = False

    def detect_layout(self) -> SlideLayout:
        if self.is_quote:
            return SlideLayout.QUOTE
        if self.is_section:
            return SlideLayout.SECTION
        if not self.content:
            return SlideLayout.TITLE
        if len(self.content) > TWO_COLUMN_THRESHOLD:
            return SlideLayout.TWO_COLUMNS
        return SlideLayout.TITLE_BULLETS

    def to_slide(self) -> Slide:
        element_type = ElementType.QUOTE if self.is_quote else ElementType.BULLET
        elements = [
            SlideElement(
                type=element_type.value,
                content=text,
                sub_content=self.subtitle if self.is_quote else None
            )
            for text in self.content
        ]
        return Slide(
            id=generate_id(),
            layout=self.detect_layout().value,
            title=self.title,
            subtitle=self.subtitle,
            elements=elements
        )


@dataclass
class OutlineValidation:
    """Outcome of ``validate_outline``; invalid outlines can still be parsed"""
    valid: bool
    errors: List[str] = field(default_factory=list)


class OutlineParser:
    """Parser for outline text"""
    def __init__(self, text: str):
        self.text = text or ''
        self.sections: List[OutlineSection] = []
        self._current: Optional[OutlineSection] = None

    def parse(self) -> List[Slide]:
        """Parse the outline and return one slide per section"""
        return [section.to_slide() for section in self.parse_sections()]

    def parse_sections(self) -> List[OutlineSection]:
        """Scan the text top to bottom and return the raw sections"""
        self.sections = []
        self._current = None

        for line in self.text.split('\n'):
            self._parse_line(line.strip())

        # Flush the last section
        self._flush()
        return self.sections

    def _flush(self):
        if self._current is not None:
            self.sections.append(self._current)
        self._current = None

    def _parse_line(self, line: str):  # pylint: disable=too-many-return-statements
        if line.startswith('# '):
            self._flush()
            self._current = OutlineSection(title=line[2:].strip())
            return

        if line.startswith('## '):
            self._flush()
            title = line[3:].strip()
            section = OutlineSection(title=title)
            if SECTION_PREFIX.match(title):
                section.is_section = True
                section.title = SECTION_PREFIX.sub('', title, count=1)
            self._current = section
            return

        section = self._current
        if section is None:
            return

        if line.startswith('### '):
            section.subtitle = line[4:].strip()
            return

        if line.startswith('> '):
            section.is_quote = True
            quote = line[2:].strip()
            if quote.startswith(ATTRIBUTION_MARKERS):
                section.subtitle = quote[1:].strip()
            else:
                section.content.append(quote)
            return

        if line.startswith(('- ', '* ')):
            section.content.append(line[2:].strip())
            return

        if NUMBERED_ITEM.match(line):
            section.content.append(NUMBERED_ITEM.sub('', line, count=1).strip())
            return

        if line and not line.startswith('#'):
            section.content.append(line)


def parse_outline(text: str) -> List[Slide]:
    """Parse outline text into slides"""
    return OutlineParser(text).parse()


def validate_outline(text: str) -> OutlineValidation:
    """
    Report problems with an outline

    Problems are advisory: ``parse_outline`` still returns whatever it can.
    """
    errors = []

    if not text or not text.strip():
        errors.append('Outline is empty')
        return OutlineValidation(valid=False, errors=errors)

    if not TITLE_HEADING.search(text):
        errors.append('Presentation should start with a title (# Title)')

    sections = OutlineParser(text).parse_sections()
    if not sections:
        errors.append('No slides detected. Use # for the title and ## for slides.')

    if len(sections) > MAX_SECTIONS:
        errors.append(f'Too many slides (max {MAX_SECTIONS}). Consider splitting your content.')

    return OutlineValidation(valid=not errors, errors=errors)


def slides_to_outline(slides: List[Slide]) -> str:
    """
    Write slides back as outline text

    Title, section, quote and bullet slides survive a round trip; other
    layouts are written as plain bullet slides and lose their styling.
    """
    lines = []

    for slide in slides:
        if slide.layout == SlideLayout.TITLE:
            lines.append(f"# {slide.title or 'Untitled'}")
            if slide.subtitle:
                lines.append(f"### {slide.subtitle}")
        elif slide.layout == SlideLayout.SECTION:
            lines.append(f"## Section: {slide.title or 'Section'}")
            if slide.subtitle:
                lines.append(f"### {slide.subtitle}")
        elif slide.layout == SlideLayout.QUOTE:
            lines.append(f"## {slide.title or 'Quote'}")
            for element in slide.elements:
                lines.append(f"> {element.content}")
                if element.sub_content:
                    lines.append(f"> — {element.sub_content}")
        else:
            lines.append(f"## {slide.title or 'Slide'}")
            if slide.subtitle:
                lines.append(f"### {slide.subtitle}")
            for element in slide.elements:
                if element.type in (ElementType.BULLET, ElementType.TEXT):
                    lines.append(f"- {element.content}")

        lines.append('')

    return '\n'.join(lines)
