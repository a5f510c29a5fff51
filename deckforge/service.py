"""
Request handlers for the generate and export operations.

Both handlers take the decoded JSON payload and return ``(status, envelope)``
where the envelope is ``{"success": true, "data": ...}`` or
``{"success": false, "error": ..., "details": ...}``. Status follows HTTP
conventions: 200, 400 for malformed input, 500 for everything else.
"""
import json
import logging
from typing import Any, Callable, Dict, Optional, Tuple

import pydantic

from . import themes
from .ai_adapter import OutlineGenerator, NOT_CONFIGURED_MESSAGE
from .config import Settings
from .errors import DeckForgeError, ValidationError, ServiceNotConfiguredError
from .generator import PowerPointGenerator, export_filename
from .image_handler import ImageHandler
from .schemas import GenerateRequest, ExportRequest
from .styles import render_style

logger = logging.getLogger(__name__)

Envelope = Dict[str, Any]
Response = Tuple[int, Envelope]

OK = 200
BAD_REQUEST = 400
SERVER_ERROR = 500

UNEXPECTED_ERROR_MESSAGE = 'An unexpected error occurred'


def success(data: Any) -> Envelope:
    return {'success': True, 'data': data}


def failure(error: str, details: Any = None) -> Envelope:
    envelope = {'success': False, 'error': error}
    if details is not None:
        envelope['details'] = details
    return envelope


def status_for(error: DeckForgeError) -> int:
    return BAD_REQUEST if isinstance(error, ValidationError) else SERVER_ERROR


def _schema_failure(message: str, error: pydantic.ValidationError) -> Response:
    return BAD_REQUEST, failure(message, json.loads(error.json(include_url=False)))


def build_generator(settings: Optional[Settings] = None) -> PowerPointGenerator:
    """Fresh document builder configured from settings"""
    settings = settings or Settings.from_env()
    return PowerPointGenerator(style=render_style(settings.visual_style),
                               image_handler=ImageHandler(settings.image_cache_dir,
                                                          settings.allow_remote_images))


def handle_generate(payload: Any, generator: Optional[OutlineGenerator] = None,
                    on_chunk: Optional[Callable[[str], None]] = None) -> Response:
    """
    Draft an outline from ``{topic, slideCount, style, language}``

    Args:
        payload: Decoded request body
        generator: Outline generator; one configured from the environment
            is created when omitted
        on_chunk: When given, the reply is streamed and every raw text
            chunk is passed here before the final outline is parsed
    """
    try:
        request = GenerateRequest.model_validate(payload)
    except pydantic.ValidationError as e:
        logger.warning("Invalid generate request: %d issue(s)", e.error_count())
        return _schema_failure('Invalid request', e)

    try:
        generator = generator or OutlineGenerator()
        if not generator.is_available():
            logger.error("Generate error: %s", NOT_CONFIGURED_MESSAGE)
            return SERVER_ERROR, failure(NOT_CONFIGURED_MESSAGE)
        generation_request = request.to_generation_request()

        if on_chunk is None:
            outline = generator.generate(generation_request)
        else:
            stream = generator.stream(generation_request)
            try:
                for chunk in stream:
                    on_chunk(chunk)
            finally:
                stream.close()
                if not stream.finished:
                    logger.warning("Generation stream closed before the reply ended")
            outline = stream.result()

        return OK, success(outline.to_data())
    except ServiceNotConfiguredError as e:
        logger.error("Generate error: %s", e.message)
        return SERVER_ERROR, failure(NOT_CONFIGURED_MESSAGE)
    except DeckForgeError as e:
        logger.error("Generate error: %s", e.message)
        return status_for(e), failure(e.message, e.details)
    except Exception as e:  # pylint: disable=broad-exception-caught
        logger.exception("Unexpected generate error: %s", str(e))
        return SERVER_ERROR, failure(UNEXPECTED_ERROR_MESSAGE)


def handle_export(payload: Any, generator: Optional[PowerPointGenerator] = None) -> Response:
    """
    Render a presentation payload to a base64 .pptx

    Returns ``{"base64": ..., "filename": ...}`` as the envelope data.
    """
    try:
        request = ExportRequest.model_validate(payload)
    except pydantic.ValidationError as e:
        logger.warning("Invalid export request: %d issue(s)", e.error_count())
        return _schema_failure('Invalid presentation data', e)

    try:
        presentation = request.to_presentation()
        custom_theme = request.custom_theme_data()
        if custom_theme is not None:
            presentation.custom_theme = themes.validate_custom_theme(custom_theme)

        generator = generator or build_generator()
        encoded = generator.generate_base64(presentation)

        return OK, success({
            'base64': encoded,
            'filename': export_filename(presentation.title),
        })
    except DeckForgeError as e:
        logger.error("Export error: %s", e.message)
        return status_for(e), failure(e.message, e.details)
    except Exception as e:  # pylint: disable=broad-exception-caught
        logger.exception("Unexpected export error: %s", str(e))
        return SERVER_ERROR, failure(UNEXPECTED_ERROR_MESSAGE)
