"""
Drafts presentation outlines with the Anthropic messages API.

The reply is expected to be a JSON outline, optionally wrapped in a fenced
code block. Layouts and element types the renderer does not know are coerced
rather than rejected, and every slide gets a fresh id.
"""
import json
import re
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, ContextManager, Dict, Iterator, List, Optional

import anthropic

from .config import Settings
from .errors import GenerationError, ServiceNotConfiguredError
from .models import Slide, SlideElement, SlideLayout, ElementType, generate_id
from .prompts import SYSTEM_PROMPT, build_prompt

logger = logging.getLogger(__name__)

CODE_FENCE = re.compile(r'```(?:json)?\s*([\s\S]*?)```')
NOT_CONFIGURED_MESSAGE = 'API key not configured. Please set ANTHROPIC_API_KEY in your environment.'


@dataclass
class LLMConfig:
    """Configuration for the outline generator"""
    api_key: Optional[str] = None
    model: str = Settings.model
    max_tokens: int = Settings.max_tokens

    @classmethod
    def from_settings(cls, settings: Settings) -> 'LLMConfig':
        return cls(api_key=settings.anthropic_api_key, model=settings.model,
                   max_tokens=settings.max_tokens)


@dataclass
class GenerationRequest:
    """Parameters of one outline request"""
    topic: str
    slide_count: int = 8
    style: str = 'formal'
    language: str = 'en'

    @property
    def prompt(self) -> str:
        return build_prompt(self.topic, self.slide_count, self.style, self.language)


@dataclass
class GeneratedOutline:
    """Title and slides parsed from a generation reply"""
    title: str
    slides: List[Slide] = field(default_factory=list)

    def to_data(self) -> Dict[str, Any]:
        return {'title': self.title, 'slides': [slide.to_data() for slide in self.slides]}


def extract_json_text(text: str) -> str:
    """Inner content of the first fenced code block, or the whole text"""
    match = CODE_FENCE.search(text)
    if match:
        text = match.group(1)
    return text.strip()


def _optional_text(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _coerce_element(data: Dict[str, Any]) -> SlideElement:
    element_type = ElementType.coerce(data.get('type'), ElementType.TEXT)
    content = data.get('content')
    return SlideElement(
        type=element_type.value,
        content='' if content is None else str(content),
        sub_content=_optional_text(data.get('subContent')),
    )


def _coerce_slide(data: Dict[str, Any]) -> Slide:
    layout = SlideLayout.coerce(data.get('layout'), SlideLayout.TITLE_BULLETS)
    if layout.value != data.get('layout'):
        logger.warning("Unknown layout %r in generated outline, using %s",
                       data.get('layout'), layout.value)

    elements = data.get('elements')
    return Slide(
        id=generate_id(),
        layout=layout.value,
        title=_optional_text(data.get('title')),
        subtitle=_optional_text(data.get('subtitle')),
        elements=[_coerce_element(e) for e in elements if isinstance(e, dict)]
        if isinstance(elements, list) else [],
        notes=_optional_text(data.get('notes')),
    )


def parse_outline_reply(text: Optional[str]) -> GeneratedOutline:
    """
    Parse the generation reply into an outline

    Raises:
        GenerationError: if there is no text, the text is not JSON, or the
            JSON is not an object with a ``slides`` list
    """
    if not text or not text.strip():
        raise GenerationError('No text content in response')

    try:
        parsed = json.loads(extract_json_text(text))
    except json.JSONDecodeError as e:
        raise GenerationError('Failed to parse AI response as JSON') from e

    if not isinstance(parsed, dict) or not isinstance(parsed.get('slides'), list):
        raise GenerationError('AI response does not contain a list of slides')

    slides = [_coerce_slide(s) for s in parsed['slides'] if isinstance(s, dict)]
    title = parsed.get('title')
    if not isinstance(title, str) or not title:
        title = next((slide.title for slide in slides if slide.title), '')
    return GeneratedOutline(title=title, slides=slides)


def _translate_api_error(error: anthropic.APIError) -> GenerationError:
    if isinstance(error, anthropic.AuthenticationError):
        return ServiceNotConfiguredError(NOT_CONFIGURED_MESSAGE)
    return GenerationError(f"Generation failed: {error}")


class GenerationStream:
    """
    Lazily pulled text chunks of a streamed generation.

    Iterating opens the SDK stream and yields raw fragments as they arrive;
    they are never parsed individually. ``result()`` parses the accumulated
    text and is only available once iteration has run to the end. Closing
    the stream, or dropping the iterator early, releases the connection.
    """

    def __init__(self, open_stream: Callable[[], ContextManager]):
        self._open_stream = open_stream
        self._chunks: List[str] = []
        self._finished = False
        self._iterator: Optional[Iterator[str]] = None

    def __iter__(self) -> Iterator[str]:
        if self._iterator is None:
            self._iterator = self._produce()
        return self._iterator

    def _produce(self) -> Iterator[str]:
        try:
            with self._open_stream() as stream:
                for text in stream.text_stream:
                    self._chunks.append(text)
                    yield text
        except anthropic.APIError as e:
            raise _translate_api_error(e) from e
        self._finished = True

    @property
    def text(self) -> str:
        return ''.join(self._chunks)

    @property
    def finished(self) -> bool:
        return self._finished

    def close(self):
        if self._iterator is not None:
            self._iterator.close()

    def result(self) -> GeneratedOutline:
        if not self._finished:
            raise GenerationError('Generation stream was not consumed to the end')
        return parse_outline_reply(self.text)


class OutlineGenerator:
    """Client for drafting outlines; the SDK client is created on first use"""

    def __init__(self, config: Optional[LLMConfig] = None, client=None):
        """
        Initialize the generator

        Args:
            config: Model settings; read from the environment when omitted
            client: Pre-built client exposing ``messages.create`` and
                ``messages.stream``
        """
        self.config = config or LLMConfig.from_settings(Settings.from_env())
        self._client = client

    @property
    def client(self):
        """Lazy-load the API client."""
        if self._client is None:
            self._client = self._create_client()
        return self._client

    def _create_client(self):
        if not self.config.api_key:
            raise ServiceNotConfiguredError(NOT_CONFIGURED_MESSAGE)
        return anthropic.Anthropic(api_key=self.config.api_key, max_retries=0)

    def is_available(self) -> bool:
        try:
            _ = self.client
            return True
        except ServiceNotConfiguredError:
            return False

    def _message_params(self, request: GenerationRequest) -> Dict[str, Any]:
        return {
            'model': self.config.model,
            'max_tokens': self.config.max_tokens,
            'system': SYSTEM_PROMPT,
            'messages': [{'role': 'user', 'content': request.prompt}],
        }

    def generate(self, request: GenerationRequest) -> GeneratedOutline:
        """Request a complete outline and parse it"""
        logger.info("Generating %d-slide outline about %r (%s, %s)", request.slide_count,
                    request.topic, request.style, request.language)
        client = self.client

        try:
            message = client.messages.create(**self._message_params(request))
        except anthropic.APIError as e:
            raise _translate_api_error(e) from e

        text = next((block.text for block in message.content
                     if getattr(block, 'type', None) == 'text'), None)
        outline = parse_outline_reply(text)
        logger.info("Generated outline %r with %d slide(s)", outline.title, len(outline.slides))
        return outline

    def stream(self, request: GenerationRequest) -> GenerationStream:
        """Request an outline as a stream of text chunks"""
        logger.info("Streaming %d-slide outline about %r", request.slide_count, request.topic)
        client = self.client
        params = self._message_params(request)
        return GenerationStream(lambda: client.messages.stream(**params))
