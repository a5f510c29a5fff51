"""
Typed readings of pipe-delimited element content.

Several layouts pack a small tuple into one ``content`` string, e.g.
``"85%|Customer satisfaction"`` on a stats slide. Each layout's shape is
decoded here into a record; missing fields come back as empty strings.
"""
from dataclasses import dataclass, field
from typing import List

DELIMITER = '|'


def split_fields(content: str) -> List[str]:
    """Split raw content on the delimiter, stripping each field"""
    return [part.strip() for part in (content or '').split(DELIMITER)]


def _field(parts: List[str], index: int) -> str:
    return parts[index] if index < len(parts) else ''


@dataclass
class StatRecord:
    """``value|label``"""
    value: str
    label: str = ''

    @classmethod
    def from_content(cls, content: str) -> 'StatRecord':
        parts = split_fields(content)
        return cls(value=_field(parts, 0), label=_field(parts, 1))


@dataclass
class CardRecord:
    """``heading|body``; a card without a pipe is all body"""
    heading: str
    body: str

    @classmethod
    def from_content(cls, content: str) -> 'CardRecord':
        parts = split_fields(content)
        if len(parts) == 1:
            return cls(heading='', body=parts[0])
        return cls(heading=parts[0], body=parts[1])


@dataclass
class StepRecord:
    """``step|description``"""
    step: str
    description: str = ''

    @classmethod
    def from_content(cls, content: str) -> 'StepRecord':
        parts = split_fields(content)
        return cls(step=_field(parts, 0), description=_field(parts, 1))


@dataclass
class ComparisonColumn:
    """``columnTitle|feature1|feature2|...``; empty features are dropped, they are bullet lines"""
    title: str
    features: List[str] = field(default_factory=list)

    @classmethod
    def from_content(cls, content: str) -> 'ComparisonColumn':
        parts = split_fields(content)
        return cls(title=parts[0], features=[p for p in parts[1:] if p])


@dataclass
class TableRow:
    """One row of cells; empty cells are kept so columns stay aligned"""
    cells: List[str] = field(default_factory=list)

    @classmethod
    def from_content(cls, content: str) -> 'TableRow':
        return cls(cells=split_fields(content))

    def cells_for(self, width: int) -> List[str]:
        """Cells padded with blanks or truncated to exactly ``width`` columns"""
        return (self.cells + [''] * width)[:width]
