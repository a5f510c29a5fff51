"""Pytest configuration and fixtures."""

import base64
import io
from types import SimpleNamespace

import pytest
from PIL import Image

from deckforge.generator import PowerPointGenerator
from deckforge.image_handler import ImageHandler


@pytest.fixture
def png_bytes() -> bytes:
    """A 40x20 PNG: red top-left, green centre, blue top-right."""
    image = Image.new('RGB', (40, 20), (255, 255, 255))
    for x in range(0, 10):
        for y in range(0, 5):
            image.putpixel((x, y), (255, 0, 0))
            image.putpixel((x + 30, y), (0, 0, 255))
    for x in range(15, 25):
        for y in range(7, 13):
            image.putpixel((x, y), (0, 128, 0))
    buffer = io.BytesIO()
    image.save(buffer, format='PNG')
    return buffer.getvalue()


@pytest.fixture
def logo_data_uri(png_bytes) -> str:
    return 'data:image/png;base64,' + base64.b64encode(png_bytes).decode('ascii')


@pytest.fixture
def image_handler(tmp_path) -> ImageHandler:
    return ImageHandler(cache_dir=str(tmp_path / 'image_cache'))


@pytest.fixture
def builder(image_handler) -> PowerPointGenerator:
    """Generator with an isolated image cache."""
    return PowerPointGenerator(image_handler=image_handler)


@pytest.fixture
def slide_texts():
    """Return a function listing every non-empty text on a python-pptx slide."""
    def collect(slide):
        texts = []
        for shape in slide.shapes:
            if shape.has_text_frame and shape.text_frame.text:
                texts.append(shape.text_frame.text)
            elif getattr(shape, 'has_table', False) and shape.has_table:
                for row in shape.table.rows:
                    texts.extend(cell.text for cell in row.cells)
        return texts
    return collect


@pytest.fixture
def presentation_data() -> dict:
    """A small deck in wire format covering several layouts."""
    return {
        'id': 'deck-1',
        'title': 'Quarterly Review: Q3',
        'theme': 'corporate',
        'slides': [
            {'id': 's1', 'layout': 'title', 'title': 'Quarterly Review', 'subtitle': 'Q3 results',
             'elements': [], 'notes': 'Welcome everyone'},
            {'id': 's2', 'layout': 'title-bullets', 'title': 'Highlights', 'elements': [
                {'type': 'bullet', 'content': 'Revenue up'},
                {'type': 'bullet', 'content': 'Churn down'},
            ]},
            {'id': 's3', 'layout': 'stats', 'title': 'Key Numbers', 'elements': [
                {'type': 'text', 'content': '85%|Customer satisfaction'},
                {'type': 'text', 'content': '2M+|Active users'},
            ]},
            {'id': 's4', 'layout': 'quote', 'title': 'Voice of the customer', 'elements': [
                {'type': 'quote', 'content': 'It just works.', 'subContent': 'A customer'},
            ]},
        ],
    }


class FakeStream:
    """Context manager standing in for the SDK's message stream."""

    def __init__(self, chunks):
        self.chunks = list(chunks)
        self.entered = False
        self.closed = False
        self.yielded = 0

    def __enter__(self):
        self.entered = True
        return self

    def __exit__(self, exc_type, exc, tb):
        self.closed = True
        return False

    @property
    def text_stream(self):
        for chunk in self.chunks:
            self.yielded += 1
            yield chunk


class FakeMessages:
    def __init__(self, reply='', chunks=None, error=None):
        self.reply = reply
        self.chunks = chunks if chunks is not None else [reply]
        self.error = error
        self.calls = []
        self.streams = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return SimpleNamespace(content=[SimpleNamespace(type='text', text=self.reply)])

    def stream(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        stream = FakeStream(self.chunks)
        self.streams.append(stream)
        return stream


class FakeAnthropic:
    """Minimal client exposing ``messages.create`` and ``messages.stream``."""

    def __init__(self, reply='', chunks=None, error=None):
        self.messages = FakeMessages(reply, chunks, error)


@pytest.fixture
def fake_client_factory():
    return FakeAnthropic


@pytest.fixture
def outline_reply() -> str:
    """A fenced five-slide reply as the model would send it."""
    return '''Here is your deck:
```json
{
  "title": "Renewable Energy",
  "slides": [
    {"layout": "title", "title": "Renewable Energy", "subtitle": "Powering tomorrow", "elements": []},
    {"layout": "stats", "title": "By the numbers", "elements": [
      {"type": "text", "content": "30%|Share of global power"},
      {"type": "text", "content": "12M|Jobs worldwide"}
    ]},
    {"layout": "cards", "title": "Sources", "elements": [
      {"type": "text", "content": "Solar|Photovoltaic panels"},
      {"type": "text", "content": "Wind|Onshore and offshore"},
      {"type": "text", "content": "Hydro|Dams and run-of-river"}
    ]},
    {"layout": "hologram", "title": "Outlook", "elements": [
      {"type": "sparkle", "content": "Storage gets cheaper"}
    ]},
    {"layout": "quote", "title": "Closing", "elements": [
      {"type": "quote", "content": "The stone age did not end for lack of stone.", "subContent": "Ahmed Yamani"}
    ]}
  ]
}
```'''
