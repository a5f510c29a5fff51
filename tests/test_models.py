"""Tests for the content model and pipe-delimited records."""

from deckforge.models import (
    SlideLayout, ElementType, SlideElement, Slide, Presentation, generate_id
)
from deckforge.records import (
    StatRecord, CardRecord, StepRecord, ComparisonColumn, TableRow, split_fields
)


class TestSlideLayout:
    """Tests for the layout enumeration."""

    def test_thirteen_layouts(self):
        """The closed set has thirteen members."""
        assert len(SlideLayout) == 13
        assert SlideLayout.values()[0] == 'title'
        assert 'table' in SlideLayout.values()

    def test_plain_strings_compare_equal(self):
        """Wire strings compare equal to members."""
        assert 'two-columns' == SlideLayout.TWO_COLUMNS
        assert SlideLayout('image-left') is SlideLayout.IMAGE_LEFT

    def test_coerce_unknown(self):
        """Unknown values fall back to the given default."""
        assert SlideLayout.coerce('hologram', SlideLayout.TITLE_BULLETS) is SlideLayout.TITLE_BULLETS
        assert SlideLayout.coerce(None, SlideLayout.TITLE) is SlideLayout.TITLE
        assert SlideLayout.coerce('quote', SlideLayout.TITLE) is SlideLayout.QUOTE

    def test_element_type_coerce(self):
        assert ElementType.coerce('sparkle', ElementType.TEXT) is ElementType.TEXT
        assert ElementType.coerce('bullet', ElementType.TEXT) is ElementType.BULLET


class TestSlide:
    """Tests for slides and elements."""

    def test_generate_id_is_unique(self):
        ids = {generate_id() for _ in range(100)}
        assert len(ids) == 100

    def test_renderable_elements_skip_blank(self):
        """Blank content is filtered out, order kept."""
        slide = Slide(id='a', layout='title-bullets', elements=[
            SlideElement(type='bullet', content='One'),
            SlideElement(type='bullet', content='   '),
            SlideElement(type='bullet', content=''),
            SlideElement(type='bullet', content='Two'),
        ])
        assert [e.content for e in slide.renderable_elements()] == ['One', 'Two']

    def test_from_data_and_back(self):
        """Wire dictionaries keep their camelCase keys."""
        data = {
            'id': 'x1', 'layout': 'quote', 'title': 'Q',
            'elements': [{'type': 'quote', 'content': 'Hello', 'subContent': 'Me'}],
        }
        slide = Slide.from_data(data)
        assert slide.elements[0].sub_content == 'Me'
        assert slide.to_data() == data

    def test_missing_id_is_generated(self):
        slide = Slide.from_data({'layout': 'title'})
        assert slide.id
        assert slide.elements == []


class TestPresentation:
    """Tests for presentations."""

    def test_custom_theme_round_trip(self, presentation_data):
        presentation_data['customTheme'] = {
            'name': 'custom-1', 'displayName': 'Mine', 'description': '',
            'colors': {'primary': '#111111', 'secondary': '#222222', 'background': '#ffffff',
                       'text': '#000000', 'accent': '#ff0000', 'muted': '#888888'},
            'fonts': {'heading': 'Arial', 'body': 'Arial', 'headingUppercase': True},
            'logo': None,
        }
        presentation = Presentation.from_data(presentation_data)

        assert presentation.custom_theme.fonts.heading_uppercase is True
        assert presentation.to_data()['customTheme'] == presentation_data['customTheme']
        assert len(presentation.slides) == 4

    def test_default_theme(self):
        assert Presentation.from_data({'title': 'T'}).theme == 'corporate'


class TestRecords:
    """Tests for pipe-delimited element content."""

    def test_split_fields_strips(self):
        assert split_fields(' a | b |c ') == ['a', 'b', 'c']

    def test_stat_value_and_label(self):
        """A stats element splits into value and label."""
        stat = StatRecord.from_content('85%|Customer satisfaction')
        assert stat.value == '85%'
        assert stat.label == 'Customer satisfaction'

    def test_stat_without_pipe(self):
        """Without a pipe the whole string is the value."""
        stat = StatRecord.from_content('Just text')
        assert stat.value == 'Just text'
        assert stat.label == ''

    def test_card_without_pipe_is_body(self):
        card = CardRecord.from_content('Only a description')
        assert card.heading == ''
        assert card.body == 'Only a description'

    def test_card_with_heading(self):
        card = CardRecord.from_content('Fast|Under a second')
        assert (card.heading, card.body) == ('Fast', 'Under a second')

    def test_step_missing_description(self):
        step = StepRecord.from_content('Kickoff')
        assert step.step == 'Kickoff'
        assert step.description == ''

    def test_comparison_drops_empty_features(self):
        column = ComparisonColumn.from_content('Pro|Fast||Cheap|')
        assert column.title == 'Pro'
        assert column.features == ['Fast', 'Cheap']

    def test_table_row_pads_and_truncates(self):
        row = TableRow.from_content('a|b')
        assert row.cells_for(3) == ['a', 'b', '']
        assert row.cells_for(1) == ['a']

    def test_table_row_keeps_empty_cells(self):
        row = TableRow.from_content('Region||Q3')
        assert row.cells_for(3) == ['Region', '', 'Q3']
