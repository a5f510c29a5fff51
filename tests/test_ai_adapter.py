"""Tests for the AI outline adapter."""

import anthropic
import httpx
import pytest

from deckforge.ai_adapter import (
    OutlineGenerator, LLMConfig, GenerationRequest, parse_outline_reply, extract_json_text,
    NOT_CONFIGURED_MESSAGE
)
from deckforge.errors import GenerationError, ServiceNotConfiguredError
from deckforge.models import SlideLayout
from deckforge.prompts import SYSTEM_PROMPT, build_prompt


REQUEST = GenerationRequest(topic='Renewable energy', slide_count=5, style='formal', language='en')


def api_request() -> httpx.Request:
    return httpx.Request('POST', 'https://api.anthropic.com/v1/messages')


class TestPrompts:
    """Tests for prompt composition."""

    def test_prompt_embeds_parameters(self):
        prompt = build_prompt('Bees', 6, 'casual', 'fr')

        assert 'Create a 6-slide presentation about: "Bees"' in prompt
        assert 'friendly, conversational' in prompt
        assert 'Write all content in French.' in prompt

    def test_unknown_language_is_english(self):
        assert 'Write all content in English.' in build_prompt('Bees', 3, 'formal', 'jp')

    def test_system_prompt_lists_every_layout(self):
        for layout in SlideLayout.values():
            assert f'"{layout}"' in SYSTEM_PROMPT


class TestParseOutlineReply:
    """Tests for reply parsing and coercion."""

    def test_fenced_reply(self, outline_reply):
        outline = parse_outline_reply(outline_reply)

        assert outline.title == 'Renewable Energy'
        assert len(outline.slides) == 5
        assert outline.slides[0].layout == 'title'

    def test_unknown_values_are_coerced(self, outline_reply):
        slide = parse_outline_reply(outline_reply).slides[3]
        assert slide.layout == 'title-bullets'
        assert slide.elements[0].type == 'text'

    def test_ids_are_fresh(self):
        reply = '{"title": "T", "slides": [{"id": "same", "layout": "title"}, ' \
                '{"id": "same", "layout": "section"}]}'
        ids = [slide.id for slide in parse_outline_reply(reply).slides]
        assert 'same' not in ids
        assert len(set(ids)) == 2

    def test_plain_json_without_fence(self):
        outline = parse_outline_reply('  {"title": "Plain", "slides": []}  ')
        assert outline.title == 'Plain'
        assert outline.slides == []

    def test_extract_json_text(self):
        assert extract_json_text('```\n{"a": 1}\n```') == '{"a": 1}'
        assert extract_json_text('text ```json {"b": 2}``` more') == '{"b": 2}'

    @pytest.mark.parametrize('reply', [None, '', '   '])
    def test_no_text(self, reply):
        with pytest.raises(GenerationError, match='No text content'):
            parse_outline_reply(reply)

    def test_invalid_json(self):
        with pytest.raises(GenerationError, match='Failed to parse AI response as JSON'):
            parse_outline_reply('```json\n{"title": "broken",\n```')

    def test_missing_slides(self):
        with pytest.raises(GenerationError):
            parse_outline_reply('{"title": "No slides"}')


class TestOutlineGenerator:
    """Tests for the generator against a fake client."""

    def test_end_to_end_five_slides(self, fake_client_factory, outline_reply):
        """A five-slide request yields five slides with known layouts."""
        client = fake_client_factory(reply=outline_reply)
        outline = OutlineGenerator(LLMConfig(api_key='test'), client=client).generate(REQUEST)

        assert len(outline.slides) == 5
        assert outline.slides[0].layout == 'title'
        assert all(slide.layout in SlideLayout.values() for slide in outline.slides)

        call = client.messages.calls[0]
        assert call['system'] == SYSTEM_PROMPT
        assert call['max_tokens'] == 4096
        assert 'Renewable energy' in call['messages'][0]['content']

    def test_missing_key(self):
        generator = OutlineGenerator(LLMConfig(api_key=None))

        assert not generator.is_available()
        with pytest.raises(ServiceNotConfiguredError, match='API key not configured'):
            generator.generate(REQUEST)

    def test_client_created_with_key(self):
        generator = OutlineGenerator(LLMConfig(api_key='sk-test'))
        assert isinstance(generator.client, anthropic.Anthropic)
        assert generator.client.max_retries == 0

    def test_authentication_failure(self, fake_client_factory):
        response = httpx.Response(401, request=api_request())
        error = anthropic.AuthenticationError('invalid x-api-key', response=response, body=None)
        generator = OutlineGenerator(LLMConfig(api_key='bad'),
                                     client=fake_client_factory(error=error))

        with pytest.raises(ServiceNotConfiguredError) as info:
            generator.generate(REQUEST)
        assert info.value.message == NOT_CONFIGURED_MESSAGE

    def test_connection_failure(self, fake_client_factory):
        error = anthropic.APIConnectionError(request=api_request())
        generator = OutlineGenerator(LLMConfig(api_key='key'),
                                     client=fake_client_factory(error=error))

        with pytest.raises(GenerationError) as info:
            generator.generate(REQUEST)
        assert not isinstance(info.value, ServiceNotConfiguredError)


class TestGenerationStream:
    """Tests for streamed generation."""

    def test_chunks_then_result(self, fake_client_factory, outline_reply):
        chunks = [outline_reply[i:i + 40] for i in range(0, len(outline_reply), 40)]
        client = fake_client_factory(chunks=chunks)
        stream = OutlineGenerator(LLMConfig(api_key='k'), client=client).stream(REQUEST)

        received = list(stream)

        assert received == chunks
        assert stream.finished
        assert len(stream.result().slides) == 5
        assert client.messages.streams[0].closed

    def test_result_before_end_fails(self, fake_client_factory, outline_reply):
        client = fake_client_factory(chunks=[outline_reply[:10], outline_reply[10:]])
        stream = OutlineGenerator(LLMConfig(api_key='k'), client=client).stream(REQUEST)

        with pytest.raises(GenerationError):
            stream.result()

    def test_early_stop_releases_stream(self, fake_client_factory):
        """Stopping after one chunk closes the underlying stream."""
        client = fake_client_factory(chunks=['a', 'b', 'c', 'd'])
        stream = OutlineGenerator(LLMConfig(api_key='k'), client=client).stream(REQUEST)

        iterator = iter(stream)
        assert next(iterator) == 'a'
        stream.close()

        fake = client.messages.streams[0]
        assert fake.closed
        assert fake.yielded == 1
        assert not stream.finished

    def test_stream_not_opened_until_iterated(self, fake_client_factory):
        client = fake_client_factory(chunks=['x'])
        OutlineGenerator(LLMConfig(api_key='k'), client=client).stream(REQUEST)
        assert client.messages.streams == []

    def test_stream_bad_json(self, fake_client_factory):
        client = fake_client_factory(chunks=['not ', 'json'])
        stream = OutlineGenerator(LLMConfig(api_key='k'), client=client).stream(REQUEST)
        assert list(stream) == ['not ', 'json']
        with pytest.raises(GenerationError):
            stream.result()
