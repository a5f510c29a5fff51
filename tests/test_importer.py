"""Tests for importing slides from existing .pptx files."""

import io
import zipfile

import pytest

from deckforge.errors import PresentationImportError, ValidationError
from deckforge.importer import DeckImporter, import_presentation
from deckforge.models import Presentation


def slide_xml(*runs: str) -> str:
    paragraphs = ''.join(f'<a:p><a:r><a:t>{run}</a:t></a:r></a:p>' for run in runs)
    return (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        '<p:sld xmlns:a="http://schemas.openxmlformats.org/drawingml/2006/main" '
        'xmlns:p="http://schemas.openxmlformats.org/presentationml/2006/main">'
        f'<p:cSld><p:spTree><p:sp><p:txBody>{paragraphs}</p:txBody></p:sp></p:spTree></p:cSld>'
        '</p:sld>'
    )


def build_archive(parts: dict) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, 'w') as archive:
        for name, content in parts.items():
            archive.writestr(name, content)
    return buffer.getvalue()


class TestDeckImporter:
    """Tests for the document importer."""

    def test_numeric_slide_order(self):
        """slide10 sorts after slide2."""
        data = build_archive({
            'ppt/slides/slide10.xml': slide_xml('Tenth', 'a', 'b'),
            'ppt/slides/slide2.xml': slide_xml('Second', 'a', 'b'),
            'ppt/slides/slide1.xml': slide_xml('First'),
            'ppt/slides/_rels/slide1.xml.rels': '<Relationships/>',
            'ppt/slideLayouts/slideLayout1.xml': slide_xml('Layout text'),
        })
        deck = import_presentation(data, 'deck.pptx')

        assert [s.title for s in deck.slides] == ['First', 'Second', 'Tenth']

    def test_layout_classification(self):
        data = build_archive({
            'ppt/slides/slide1.xml': slide_xml('Welcome', 'to the show'),
            'ppt/slides/slide2.xml': slide_xml('Part two'),
            'ppt/slides/slide3.xml': slide_xml('Agenda', 'Intro'),
            'ppt/slides/slide4.xml': slide_xml('Details', 'one', 'two', 'three'),
            'ppt/slides/slide5.xml': slide_xml('x' * 60),
        })
        deck = import_presentation(data, 'talk.pptx')

        assert [s.layout for s in deck.slides] == [
            'title', 'section', 'title', 'title-bullets', 'title-bullets'
        ]
        assert [e.content for e in deck.slides[3].elements] == ['one', 'two', 'three']
        assert all(e.type == 'bullet' for e in deck.slides[3].elements)

    def test_first_slide_always_title(self):
        data = build_archive({'ppt/slides/slide1.xml': slide_xml('Intro', 'a', 'b', 'c')})
        assert import_presentation(data, 'x.pptx').slides[0].layout == 'title'

    def test_deck_title_from_first_slide(self):
        data = build_archive({'ppt/slides/slide1.xml': slide_xml('Roadmap 2025')})
        assert import_presentation(data, 'file.pptx').title == 'Roadmap 2025'

    def test_deck_title_from_filename(self):
        """An empty first slide falls back to the filename without extension."""
        data = build_archive({
            'ppt/slides/slide1.xml': slide_xml(),
            'ppt/slides/slide2.xml': slide_xml('Content'),
        })
        deck = import_presentation(data, 'Board Update.PPTX')

        assert deck.title == 'Board Update'
        assert deck.slides[0].title == 'Slide 1'

    def test_wrong_extension(self):
        with pytest.raises(ValidationError):
            import_presentation(b'whatever', 'notes.key')

    def test_not_a_zip(self):
        with pytest.raises(PresentationImportError):
            import_presentation(b'plain bytes', 'broken.pptx')

    def test_no_slides(self):
        data = build_archive({'ppt/presentation.xml': '<p:presentation/>'})
        with pytest.raises(PresentationImportError, match='No slides found'):
            import_presentation(data, 'empty.pptx')

    def test_extract_text_runs_skips_blank(self):
        runs = DeckImporter.extract_text_runs(slide_xml('One', '   ', 'Two'))
        assert runs == ['One', 'Two']

    def test_import_file(self, tmp_path):
        path = tmp_path / 'saved.pptx'
        path.write_bytes(build_archive({'ppt/slides/slide1.xml': slide_xml('Saved')}))
        assert DeckImporter().import_file(path).title == 'Saved'

    def test_import_generated_deck(self, builder):
        """Decks built by the generator import back with their text."""
        presentation = Presentation.from_data({
            'id': 'p', 'title': 'Demo', 'theme': 'corporate',
            'slides': [
                {'id': '1', 'layout': 'title', 'title': 'Demo', 'elements': []},
                {'id': '2', 'layout': 'title-bullets', 'title': 'Slide One', 'elements': [
                    {'type': 'bullet', 'content': 'A'},
                    {'type': 'bullet', 'content': 'B'},
                    {'type': 'bullet', 'content': 'C'},
                ]},
            ],
        })
        deck = import_presentation(builder.generate(presentation), 'demo.pptx')

        assert deck.title == 'Demo'
        assert deck.slides[1].title == 'Slide One'
        assert [e.content for e in deck.slides[1].elements] == ['A', 'B', 'C']
