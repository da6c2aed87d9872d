"""
Placement Planner.

Picks a spawn position for a new note that does not sit right on top of an
existing one. The search walks diagonally from a base position in fixed
steps, wraps to the base when it leaves a soft screen area, and gives up
after a fixed number of attempts. When every attempt is occupied the base
position is returned and the overlap is accepted.

Occupancy rules:
    cascade   - a candidate is taken when an existing note's top-left corner
                lies at or below-right of it, within the proximity on both
                axes. Stepping past a note is allowed, so notes cascade with
                each older title bar left peeking out.
    symmetric - a candidate is taken when an existing corner is within the
                proximity on both axes in any direction.
"""

from collections.abc import Iterable
from typing import TYPE_CHECKING, Literal

from stickynotes.core.logging import get_logger
from stickynotes.services.geometry import Point, Size

if TYPE_CHECKING:
    from stickynotes.core.config_schema import PlacementSchema

logger = get_logger(__name__)

OverlapRule = Literal["cascade", "symmetric"]

DEFAULT_BASE = Point(100, 100)
DEFAULT_STEP = 30
DEFAULT_PROXIMITY = 50
DEFAULT_MAX_ATTEMPTS = 20
DEFAULT_BOUNDARY = Size(800, 600)


class PlacementPlanner:
    """Stateless best-effort spawn position heuristic."""

    def __init__(
        self,
        base: Point = DEFAULT_BASE,
        step: int = DEFAULT_STEP,
        proximity: int = DEFAULT_PROXIMITY,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        boundary: Size = DEFAULT_BOUNDARY,
        rule: OverlapRule = "cascade",
    ) -> None:
        self.base = base
        self.step = step
        self.proximity = proximity
        self.max_attempts = max_attempts
        self.boundary = boundary
        self.rule = rule

    @classmethod
    def from_config(cls, config: "PlacementSchema") -> "PlacementPlanner":
        """Build a planner from placement.yaml settings."""
        return cls(
            base=Point(config.base.x, config.base.y),
            step=config.step,
            proximity=config.proximity,
            max_attempts=config.max_attempts,
            boundary=Size(config.boundary.width, config.boundary.height),
            rule=config.rule,
        )

    def _near(self, offset: int) -> bool:
        if self.rule == "symmetric":
            return abs(offset) < self.proximity
        return 0 <= offset < self.proximity

    def is_occupied(self, candidate: Point, existing: list[Point]) -> bool:
        """True if any existing top-left corner blocks the candidate."""
        return any(
            self._near(other.x - candidate.x) and self._near(other.y - candidate.y)
            for other in existing
        )

    def next_position(self, existing: Iterable[Point | tuple[int, int]]) -> Point:
        """
        Choose a position for a new note.

        Args:
            existing: Top-left corners of the notes currently on screen

        Returns:
            The first free candidate, or the base position if none was found
            within max_attempts
        """
        positions = [p if isinstance(p, Point) else Point(*p) for p in existing]

        candidate = self.base
        for _ in range(self.max_attempts):
            if not self.is_occupied(candidate, positions):
                return candidate

            candidate = Point(candidate.x + self.step, candidate.y + self.step)
            if candidate.x > self.boundary.width or candidate.y > self.boundary.height:
                candidate = self.base

        logger.debug(
            "No free spawn position found, using base",
            extra={"attempts": self.max_attempts, "existing": len(positions)},
        )
        return self.base
