"""
This module contains classes for pulling slide text out of existing .pptx files.
"""
import io
import re
import logging
import warnings
import zipfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Tuple, Union

from bs4 import BeautifulSoup, XMLParsedAsHTMLWarning

from .errors import PresentationImportError, ValidationError
from .models import Slide, SlideElement, SlideLayout, ElementType, generate_id

logger = logging.getLogger(__name__)

SLIDE_PART = re.compile(r'(?:^|/)slides/slide(\d+)\.xml$')
TEXT_RUN_TAG = 'a:t'
EXPECTED_EXTENSION = '.pptx'
SHORT_TITLE_LENGTH = 50


@dataclass
class ImportedDeck:
    """Slides recovered from an uploaded presentation"""
    title: str
    slides: List[Slide] = field(default_factory=list)


class DeckImporter:
    """Extracts text runs from a presentation package and turns them into slides"""

    @staticmethod
    def extract_text_runs(xml: str) -> List[str]:
        """All non-empty inline text runs of a slide part, in document order"""
        with warnings.catch_warnings():
            warnings.simplefilter('ignore', XMLParsedAsHTMLWarning)
            soup = BeautifulSoup(xml, 'html.parser')
        runs = []
        for tag in soup.find_all(TEXT_RUN_TAG):
            text = tag.get_text().strip()
            if text:
                runs.append(text)
        return runs

    @staticmethod
    def detect_layout(runs: List[str]) -> SlideLayout:
        """
        Guess a layout from the number and length of text runs

        One short run reads as a section break, two as a title slide.
        Legitimate two-line bullet slides are classed as ``title`` too.
        """
        if len(runs) <= 2:
            first = runs[0] if runs else ''
            if len(first) < SHORT_TITLE_LENGTH:
                return SlideLayout.SECTION if len(runs) == 1 else SlideLayout.TITLE
        return SlideLayout.TITLE_BULLETS

    @staticmethod
    def slide_parts(archive: zipfile.ZipFile) -> List[Tuple[int, str]]:
        """Slide members of the archive as ``(number, name)``, sorted numerically"""
        parts = []
        for name in archive.namelist():
            match = SLIDE_PART.search(name)
            if match:
                parts.append((int(match.group(1)), name))
        parts.sort()
        return parts

    def build_slide(self, index: int, xml: str) -> Tuple[Slide, List[str]]:
        """
        Turn one slide part into a slide, returned with its raw text runs

        The first slide of a deck is always a title slide.
        """
        runs = self.extract_text_runs(xml)
        layout = SlideLayout.TITLE if index == 0 else self.detect_layout(runs)

        return Slide(
            id=generate_id(),
            layout=layout.value,
            title=runs[0] if runs else f"Slide {index + 1}",
            elements=[SlideElement(type=ElementType.BULLET.value, content=text)
                      for text in runs[1:]]
        ), runs

    def import_bytes(self, data: bytes, filename: str) -> ImportedDeck:
        """
        Import a presentation from its raw bytes

        Args:
            data: Contents of the uploaded file
            filename: Original file name, used for the extension check and
                as the fallback deck title

        Raises:
            ValidationError: if the file is not a .pptx
            PresentationImportError: if the archive cannot be read or holds no slides
        """
        if not filename.lower().endswith(EXPECTED_EXTENSION):
            raise ValidationError(
                f"Please select a {EXPECTED_EXTENSION} file",
                [{'field': 'file', 'message': f'unsupported file type: {filename}'}]
            )

        try:
            archive = zipfile.ZipFile(io.BytesIO(data))
        except (zipfile.BadZipFile, ValueError) as e:
            raise PresentationImportError(f"The presentation cannot be opened: {e}") from e

        with archive:
            parts = self.slide_parts(archive)
            if not parts:
                raise PresentationImportError("No slides found in the presentation")

            logger.info("Importing %d slide(s) from %s", len(parts), filename)

            slides = []
            first_title = None
            for index, (_, name) in enumerate(parts):
                xml = archive.read(name).decode('utf-8', errors='replace')
                slide, runs = self.build_slide(index, xml)
                if index == 0 and runs:
                    first_title = runs[0]
                slides.append(slide)

        title = first_title or Path(filename).stem
        return ImportedDeck(title=title, slides=slides)

    def import_file(self, path: Union[str, Path]) -> ImportedDeck:
        """Import a presentation from disk"""
        path = Path(path)
        if not path.name.lower().endswith(EXPECTED_EXTENSION):
            raise ValidationError(
                f"Please select a {EXPECTED_EXTENSION} file",
                [{'field': 'file', 'message': f'unsupported file type: {path.name}'}]
            )
        return self.import_bytes(path.read_bytes(), path.name)


def import_presentation(data: bytes, filename: str) -> ImportedDeck:
    """Import a presentation from its raw bytes"""
    return DeckImporter().import_bytes(data, filename)
