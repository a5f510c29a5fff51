"""
Slide canvas geometry: boxes and row/column arithmetic in inches.
"""
import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple, TypeVar

T = TypeVar('T')

# 16:9 frame every slide is drawn on
CANVAS_WIDTH = 10.0
CANVAS_HEIGHT = 5.625


@dataclass
class BoundingBox:
    """Represents a bounding box with position and size, in inches"""
    left: float
    top: float
    width: float
    height: float

    def offset(self, dx: float = 0.0, dy: float = 0.0) -> 'BoundingBox':
        """Same size, shifted"""
        return BoundingBox(self.left + dx, self.top + dy, self.width, self.height)

    def inset(self, dx: float = 0.0, dy: float = 0.0) -> 'BoundingBox':
        """Shrunk by ``dx`` on the left and right and ``dy`` on the top and bottom"""
        return BoundingBox(self.left + dx, self.top + dy,
                           self.width - 2 * dx, self.height - 2 * dy)


def full_height(left: float, width: float) -> BoundingBox:
    """A band spanning the whole canvas height"""
    return BoundingBox(left, 0.0, width, CANVAS_HEIGHT)


def full_width(top: float, height: float) -> BoundingBox:
    """A band spanning the whole canvas width"""
    return BoundingBox(0.0, top, CANVAS_WIDTH, height)


def centered_row(count: int, item_width: float, gap: float,
                 canvas_width: float = CANVAS_WIDTH) -> List[float]:
    """
    Left edges of ``count`` equal items centred as a group across the canvas

    Returns an empty list for zero items.
    """
    if count <= 0:
        return []
    total_width = count * item_width + (count - 1) * gap
    start = (canvas_width - total_width) / 2
    return [start + index * (item_width + gap) for index in range(count)]


def split_columns(items: Sequence[T]) -> Tuple[List[T], List[T]]:
    """Split at ceil(n/2); the left half gets the extra item when n is odd"""
    midpoint = math.ceil(len(items) / 2)
    return list(items[:midpoint]), list(items[midpoint:])
