"""Moore-neighbor contour tracing on a binarized buffer.

AIDEV-NOTE: The tracer walks the boundary of each white area with black kept
on the walker's left. Directions are numbered clockwise from north and the
neighbor search at every step starts at (direction + 5) % 8, i.e. just past
the pixel the walker came from. Changing that offset changes which of two
touching regions owns a shared corner, so keep it as is.
"""

import logging

import numpy as np

from mapconverter.models import MIN_CONTOUR_POINTS

from .pixel_buffer import PixelBuffer

logger = logging.getLogger(__name__)

# Clockwise Moore neighborhood: N, NE, E, SE, S, SW, W, NW as (dx, dy)
DIRECTIONS = (
    (0, -1),
    (1, -1),
    (1, 0),
    (1, 1),
    (0, 1),
    (-1, 1),
    (-1, 0),
    (-1, -1),
)
SEARCH_OFFSET = 5

# 4-connected neighbors tried, in order, as the starting backtrack: W, N, E, S
BACKTRACK_ORDER = (6, 0, 2, 4)

WHITE_LEVEL = 127  # Channel values above this are white


class _TraceArena:
    """Per-call tracing state: the binary image and the visited bitmap.

    The visited bitmap is write-once, indexed by y * width + x, and never
    leaves the find_contours call that created it.
    """

    def __init__(self, white: np.ndarray):
        self.height, self.width = white.shape
        self.white = white.astype(np.uint8).tobytes()
        self.visited = bytearray(self.width * self.height)

    def is_white(self, x: int, y: int) -> bool:
        # Out of bounds counts as black
        if x < 0 or x >= self.width or y < 0 or y >= self.height:
            return False
        return self.white[y * self.width + x] == 1

    def is_visited(self, x: int, y: int) -> bool:
        return self.visited[y * self.width + x] == 1

    def initial_direction(self, x: int, y: int) -> int:
        """Direction that makes the first search start on a black 4-neighbor."""
        for backtrack in BACKTRACK_ORDER:
            dx, dy = DIRECTIONS[backtrack]
            if not self.is_white(x + dx, y + dy):
                return (backtrack - SEARCH_OFFSET) % 8
        # Not a boundary pixel; search from the west as for a plain scan hit
        return (BACKTRACK_ORDER[0] - SEARCH_OFFSET) % 8

    def trace(self, start_x: int, start_y: int) -> "list[tuple[int, int]]":
        """Walk one boundary starting at a seed pixel.

        Stops on returning to the start coordinate, on a pixel with no white
        neighbor, or after width * height steps.
        """
        contour = []
        x, y = start_x, start_y
        direction = self.initial_direction(x, y)
        max_steps = self.width * self.height
        steps = 0

        while True:
            contour.append((x, y))
            self.visited[y * self.width + x] = 1

            for i in range(8):
                candidate = (direction + i + SEARCH_OFFSET) % 8
                dx, dy = DIRECTIONS[candidate]
                if self.is_white(x + dx, y + dy):
                    x += dx
                    y += dy
                    direction = candidate
                    break
            else:
                # Isolated pixel, nowhere to go
                break

            steps += 1
            if x == start_x and y == start_y:
                break
            if steps >= max_steps:
                logger.debug(
                    "Contour from (%d, %d) truncated after %d steps",
                    start_x,
                    start_y,
                    steps,
                )
                break

        return contour


def boundary_mask(white: np.ndarray) -> np.ndarray:
    """White pixels with at least one black (or out-of-bounds) 4-neighbor."""
    padded = np.pad(white, 1, constant_values=False)
    all_neighbors_white = (
        padded[1:-1, :-2] & padded[1:-1, 2:] & padded[:-2, 1:-1] & padded[2:, 1:-1]
    )
    return white & ~all_neighbors_white


def find_contours(buffer: PixelBuffer) -> "list[list[tuple[int, int]]]":
    """Trace every white-area boundary in a binarized buffer.

    Args:
        buffer: Thresholded buffer; channel 0 above 127 is white

    Returns:
        List of contours, each a cyclic list of (x, y) integer pixel
        coordinates, in the order their seeds were found

    AIDEV-NOTE: Seeds are scanned row-major over the interior only (the
    outermost pixel ring is never a seed), skipping visited pixels, so each
    boundary is traced once from its first-discovered pixel. Contours with
    fewer than MIN_CONTOUR_POINTS points are dropped as noise.
    """
    white = buffer.data[:, :, 0] > WHITE_LEVEL
    arena = _TraceArena(white)
    height, width = white.shape

    seeds = np.zeros_like(white)
    if height > 2 and width > 2:
        seeds[1:-1, 1:-1] = boundary_mask(white)[1:-1, 1:-1]

    contours = []
    discarded = 0
    # argwhere yields (row, col) pairs in row-major order
    for y, x in np.argwhere(seeds).tolist():
        if arena.is_visited(x, y):
            continue
        contour = arena.trace(x, y)
        if len(contour) >= MIN_CONTOUR_POINTS:
            contours.append(contour)
        else:
            discarded += 1

    logger.debug(
        "Traced %d contours (%d too short, discarded)", len(contours), discarded
    )
    return contours
