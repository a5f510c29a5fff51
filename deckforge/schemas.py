"""
schemas.py — Pydantic request models for the generate and export operations.
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from .ai_adapter import GenerationRequest
from .models import SlideLayout, ElementType, Presentation


class WireModel(BaseModel):
    """Accepts both the camelCase wire names and the snake_case field names"""
    model_config = ConfigDict(populate_by_name=True)


# =============================================================================
# GENERATE
# =============================================================================

class GenerateRequest(WireModel):
    """Request to draft an outline from a topic."""
    topic: str = Field(..., min_length=1, max_length=500)
    slide_count: int = Field(8, alias='slideCount', ge=3, le=20)
    style: Literal['formal', 'casual', 'creative'] = 'formal'
    language: str = 'en'

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            'example': {'topic': 'Remote work best practices', 'slideCount': 5}
        },
    )

    def to_generation_request(self) -> GenerationRequest:
        return GenerationRequest(topic=self.topic, slide_count=self.slide_count,
                                 style=self.style, language=self.language)


# =============================================================================
# EXPORT
# =============================================================================

class SlideElementSchema(WireModel):
    """One element of a slide."""
    type: ElementType
    content: str
    sub_content: Optional[str] = Field(None, alias='subContent')


class SlideSchema(WireModel):
    """One slide of the deck."""
    id: str
    layout: SlideLayout
    title: Optional[str] = None
    subtitle: Optional[str] = None
    elements: List[SlideElementSchema] = Field(default_factory=list)
    notes: Optional[str] = None


class ThemeColorsSchema(BaseModel):
    primary: str
    secondary: str
    background: str
    text: str
    accent: str
    muted: str


class ThemeFontsSchema(WireModel):
    heading: str
    body: str
    heading_uppercase: bool = Field(False, alias='headingUppercase')


class CustomThemeSchema(WireModel):
    """Inline theme that overrides the named one."""
    name: str
    display_name: str = Field('', alias='displayName')
    description: str = ''
    colors: ThemeColorsSchema
    fonts: ThemeFontsSchema
    logo: Optional[str] = None


class ExportRequest(WireModel):
    """Request to render a full presentation."""
    id: str
    title: str
    theme: str = 'corporate'
    slides: List[SlideSchema]
    custom_theme: Optional[CustomThemeSchema] = Field(None, alias='customTheme')

    def custom_theme_data(self) -> Optional[Dict[str, Any]]:
        if self.custom_theme is None:
            return None
        return self.custom_theme.model_dump(mode='json', by_alias=True)

    def to_presentation(self) -> Presentation:
        data = self.model_dump(mode='json', by_alias=True, exclude_none=True)
        return Presentation.from_data(data)
