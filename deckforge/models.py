"""
Data models for slide decks.

This module contains the dataclasses shared by the parsers, the AI adapter
and the renderer: slides and their elements, presentations, and themes.
Each model converts to and from the camelCase dictionaries used on the wire.
"""

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, Optional, List


class SlideLayout(str, Enum):
    """The fixed set of slide arrangements the renderer knows how to draw"""
    TITLE = "title"
    TITLE_CONTENT = "title-content"
    TITLE_BULLETS = "title-bullets"
    TWO_COLUMNS = "two-columns"
    IMAGE_LEFT = "image-left"
    IMAGE_RIGHT = "image-right"
    QUOTE = "quote"
    SECTION = "section"
    STATS = "stats"
    CARDS = "cards"
    TIMELINE = "timeline"
    COMPARISON = "comparison"
    TABLE = "table"

    @classmethod
    def values(cls) -> List[str]:
        """All layout identifiers in declaration order"""
        return [member.value for member in cls]

    @classmethod
    def coerce(cls, value: Any, default: 'SlideLayout') -> 'SlideLayout':
        """Return the matching layout, or ``default`` for anything unknown"""
        try:
            return cls(value)
        except ValueError:
            return default


class ElementType(str, Enum):
    """Variant tag of a slide element"""
    TEXT = "text"
    BULLET = "bullet"
    IMAGE = "image"
    ICON = "icon"
    QUOTE = "quote"

    @classmethod
    def coerce(cls, value: Any, default: 'ElementType') -> 'ElementType':
        """Return the matching element type, or ``default`` for anything unknown"""
        try:
            return cls(value)
        except ValueError:
            return default


def generate_id() -> str:
    """Fresh opaque identifier for a slide or presentation"""
    return uuid.uuid4().hex[:9]


@dataclass
class SlideElement:
    """
    One visual unit within a slide.

    ``content`` is sometimes a pipe-delimited record (``"95%|Satisfaction"``);
    the renderer decides how to read it for each layout.
    """
    type: str
    content: str
    sub_content: Optional[str] = None

    @property
    def is_renderable(self) -> bool:
        """Elements with blank content are never drawn"""
        return bool(self.content and self.content.strip())

    @classmethod
    def from_data(cls, data: Dict[str, Any]) -> 'SlideElement':
        """Create SlideElement from parsed data"""
        content = data.get('content')
        return cls(
            type=data.get('type', ElementType.TEXT.value),
            content='' if content is None else str(content),
            sub_content=data.get('subContent')
        )

    def to_data(self) -> Dict[str, Any]:
        data = {'type': self.type, 'content': self.content}
        if self.sub_content is not None:
            data['subContent'] = self.sub_content
        return data


@dataclass
class Slide:
    """One page of the deck"""
    id: str
    layout: str
    title: Optional[str] = None
    subtitle: Optional[str] = None
    elements: List[SlideElement] = field(default_factory=list)
    notes: Optional[str] = None

    def renderable_elements(self) -> List[SlideElement]:
        """Elements in order, minus the ones with empty content"""
        return [element for element in self.elements if element.is_renderable]

    @classmethod
    def from_data(cls, data: Dict[str, Any]) -> 'Slide':
        """Create Slide from parsed data"""
        return cls(
            id=data.get('id') or generate_id(),
            layout=data.get('layout', SlideLayout.TITLE_CONTENT.value),
            title=data.get('title'),
            subtitle=data.get('subtitle'),
            elements=[SlideElement.from_data(e) for e in data.get('elements') or []],
            notes=data.get('notes')
        )

    def to_data(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            'id': self.id,
            'layout': self.layout,
            'elements': [element.to_data() for element in self.elements],
        }
        for key, value in (('title', self.title), ('subtitle', self.subtitle),
                           ('notes', self.notes)):
            if value is not None:
                data[key] = value
        return data


@dataclass
class ThemeColors:
    """The six semantic colour roles, as hex strings"""
    primary: str
    secondary: str
    background: str
    text: str
    accent: str
    muted: str

    ROLES = ('primary', 'secondary', 'background', 'text', 'accent', 'muted')

    @classmethod
    def from_data(cls, data: Dict[str, Any]) -> 'ThemeColors':
        return cls(**{role: data[role] for role in cls.ROLES})

    def to_data(self) -> Dict[str, str]:
        return {role: getattr(self, role) for role in self.ROLES}


@dataclass
class ThemeFonts:
    """Heading and body font families"""
    heading: str
    body: str
    heading_uppercase: bool = False

    @classmethod
    def from_data(cls, data: Dict[str, Any]) -> 'ThemeFonts':
        return cls(
            heading=data['heading'],
            body=data['body'],
            heading_uppercase=bool(data.get('headingUppercase', False))
        )

    def to_data(self) -> Dict[str, Any]:
        return {
            'heading': self.heading,
            'body': self.body,
            'headingUppercase': self.heading_uppercase,
        }


@dataclass
class Theme:
    """A named visual style: palette, font pair and optional logo"""
    name: str
    display_name: str
    description: str
    colors: ThemeColors
    fonts: ThemeFonts
    logo: Optional[str] = None

    @classmethod
    def from_data(cls, data: Dict[str, Any]) -> 'Theme':
        """
        Create Theme from parsed data.

        Expects a complete record; use ``themes.validate_custom_theme`` for
        untrusted input.
        """
        return cls(
            name=data['name'],
            display_name=data.get('displayName', data['name']),
            description=data.get('description', ''),
            colors=ThemeColors.from_data(data['colors']),
            fonts=ThemeFonts.from_data(data['fonts']),
            logo=data.get('logo')
        )

    def to_data(self) -> Dict[str, Any]:
        return {
            'name': self.name,
            'displayName': self.display_name,
            'description': self.description,
            'colors': self.colors.to_data(),
            'fonts': self.fonts.to_data(),
            'logo': self.logo,
        }


@dataclass
class Presentation:
    """
    A full deck.

    ``custom_theme`` takes precedence over the ``theme`` name when both are
    present. The renderer only ever reads a presentation.
    """
    id: str
    title: str
    theme: str = "corporate"
    slides: List[Slide] = field(default_factory=list)
    custom_theme: Optional[Theme] = None

    @classmethod
    def from_data(cls, data: Dict[str, Any]) -> 'Presentation':
        """Create Presentation from parsed data"""
        custom_theme = data.get('customTheme')
        return cls(
            id=data.get('id') or generate_id(),
            title=data.get('title', ''),
            theme=data.get('theme') or 'corporate',
            slides=[Slide.from_data(s) for s in data.get('slides') or []],
            custom_theme=Theme.from_data(custom_theme) if custom_theme else None
        )

    def to_data(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            'id': self.id,
            'title': self.title,
            'theme': self.theme,
            'slides': [slide.to_data() for slide in self.slides],
        }
        if self.custom_theme is not None:
            data['customTheme'] = self.custom_theme.to_data()
        return data
