"""
Geometry Controller.

Per-note state machine that turns pointer events into note bounds.

States:
    Idle                                        - no gesture in progress
    Dragging(offset)                            - title bar grabbed
    Resizing(direction, start_pointer, start_bounds) - a resize handle grabbed

All coordinates are screen coordinates. Dragging does not clamp to the
screen. Resizing clamps the size to the session constraints and keeps the
edge opposite the grabbed handle fixed.

Usage:
    controller = GeometryController(
        Bounds(100, 100, 200, 150),
        on_commit=lambda bounds: session.save(),
    )
    controller.on_pointer_down(Point(290, 240))   # bottom-right handle
    controller.on_pointer_move(Point(340, 300))
    controller.on_pointer_up()
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING, Union

from stickynotes.core.exceptions import ValidationError
from stickynotes.core.logging import get_logger

if TYPE_CHECKING:
    from stickynotes.core.config_schema import GeometrySchema
    from stickynotes.models.note import Note

logger = get_logger(__name__)

DEFAULT_MIN_WIDTH = 50
DEFAULT_MIN_HEIGHT = 50
DEFAULT_MAX_WIDTH = 9999
DEFAULT_MAX_HEIGHT = 9999
DEFAULT_HANDLE_SIZE = 12
DEFAULT_TITLE_BAR_HEIGHT = 40


@dataclass(frozen=True)
class Point:
    x: int
    y: int

    def __add__(self, other: "Point") -> "Point":
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: "Point") -> "Point":
        return Point(self.x - other.x, self.y - other.y)


@dataclass(frozen=True)
class Size:
    width: int
    height: int


@dataclass(frozen=True)
class Bounds:
    x: int
    y: int
    width: int
    height: int

    @classmethod
    def from_note(cls, note: "Note") -> "Bounds":
        return cls(note.x, note.y, note.width, note.height)

    @property
    def position(self) -> Point:
        return Point(self.x, self.y)

    @property
    def size(self) -> Size:
        return Size(self.width, self.height)

    def with_position(self, position: Point) -> "Bounds":
        return replace(self, x=position.x, y=position.y)

    def with_size(self, size: Size) -> "Bounds":
        return replace(self, width=size.width, height=size.height)

    def contains(self, point: Point) -> bool:
        return (
            self.x <= point.x < self.x + self.width
            and self.y <= point.y < self.y + self.height
        )


@dataclass(frozen=True)
class SizeConstraints:
    """Inclusive size range applied while resizing. min must be below max."""

    min_width: int = DEFAULT_MIN_WIDTH
    min_height: int = DEFAULT_MIN_HEIGHT
    max_width: int = DEFAULT_MAX_WIDTH
    max_height: int = DEFAULT_MAX_HEIGHT

    def __post_init__(self) -> None:
        if self.min_width >= self.max_width or self.min_height >= self.max_height:
            raise ValidationError(
                "Minimum dimensions must be less than maximum dimensions",
                details={
                    "min": [self.min_width, self.min_height],
                    "max": [self.max_width, self.max_height],
                },
            )

    def clamp(self, size: Size) -> Size:
        return Size(
            max(self.min_width, min(self.max_width, size.width)),
            max(self.min_height, min(self.max_height, size.height)),
        )

    def as_tuple(self) -> tuple[int, int, int, int]:
        return (self.min_width, self.min_height, self.max_width, self.max_height)


class ResizeDirection(str, Enum):
    """Compass position of a resize handle on the note border."""

    TOP_LEFT = "top_left"
    TOP = "top"
    TOP_RIGHT = "top_right"
    RIGHT = "right"
    BOTTOM_RIGHT = "bottom_right"
    BOTTOM = "bottom"
    BOTTOM_LEFT = "bottom_left"
    LEFT = "left"

    @property
    def owns_left(self) -> bool:
        return self in (ResizeDirection.TOP_LEFT, ResizeDirection.LEFT, ResizeDirection.BOTTOM_LEFT)

    @property
    def owns_right(self) -> bool:
        return self in (ResizeDirection.TOP_RIGHT, ResizeDirection.RIGHT, ResizeDirection.BOTTOM_RIGHT)

    @property
    def owns_top(self) -> bool:
        return self in (ResizeDirection.TOP_LEFT, ResizeDirection.TOP, ResizeDirection.TOP_RIGHT)

    @property
    def owns_bottom(self) -> bool:
        return self in (ResizeDirection.BOTTOM_LEFT, ResizeDirection.BOTTOM, ResizeDirection.BOTTOM_RIGHT)


class HitZone(str, Enum):
    """Non-handle areas a pointer can land on."""

    TITLE_BAR = "title_bar"
    BODY = "body"
    OUTSIDE = "outside"


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Dragging:
    offset: Point


@dataclass(frozen=True)
class Resizing:
    direction: ResizeDirection
    start_pointer: Point
    start_bounds: Bounds


GestureState = Union[Idle, Dragging, Resizing]

IDLE = Idle()

BoundsCallback = Callable[[Bounds], None]


def apply_resize(
    start: Bounds,
    direction: ResizeDirection,
    delta: Point,
    constraints: SizeConstraints,
) -> Bounds:
    """
    Compute the bounds for a resize gesture.

    Args:
        start: Bounds when the handle was grabbed
        direction: Handle being dragged
        delta: Pointer displacement since the handle was grabbed
        constraints: Size range to clamp to

    Returns:
        New bounds; the edges not owned by the handle stay where they were
    """
    x, y, width, height = start.x, start.y, start.width, start.height

    if direction.owns_left:
        width -= delta.x
        x += delta.x
    elif direction.owns_right:
        width += delta.x

    if direction.owns_top:
        height -= delta.y
        y += delta.y
    elif direction.owns_bottom:
        height += delta.y

    clamped = constraints.clamp(Size(width, height))

    # Clamping moves the owned edge back; pin the opposite edge instead.
    if clamped.width != width and direction.owns_left:
        x = start.x + start.width - clamped.width
    if clamped.height != height and direction.owns_top:
        y = start.y + start.height - clamped.height

    return Bounds(x, y, clamped.width, clamped.height)


class GeometryController:
    """
    Drag and resize state machine for one live note.

    on_commit fires when a gesture completes and after programmatic
    resizes, and is where the owner persists the note. on_moved fires on
    every bounds change during a gesture.
    """

    def __init__(
        self,
        bounds: Bounds,
        constraints: SizeConstraints | None = None,
        *,
        title_bar_height: int = DEFAULT_TITLE_BAR_HEIGHT,
        handle_size: int = DEFAULT_HANDLE_SIZE,
        handles: Iterable[ResizeDirection] = (ResizeDirection.BOTTOM_RIGHT,),
        on_commit: BoundsCallback | None = None,
        on_moved: BoundsCallback | None = None,
    ) -> None:
        self._constraints = constraints or SizeConstraints()
        self._bounds = bounds.with_size(self._constraints.clamp(bounds.size))
        self._state: GestureState = IDLE
        self._title_bar_height = title_bar_height
        self._handle_size = handle_size
        self._handles = frozenset(handles)
        self._on_commit = on_commit
        self._on_moved = on_moved

    @classmethod
    def from_config(
        cls,
        bounds: Bounds,
        config: "GeometrySchema",
        *,
        on_commit: BoundsCallback | None = None,
        on_moved: BoundsCallback | None = None,
    ) -> "GeometryController":
        """Build a controller from geometry.yaml settings."""
        constraints = SizeConstraints(
            config.min_size.width,
            config.min_size.height,
            config.max_size.width,
            config.max_size.height,
        )
        return cls(
            bounds,
            constraints,
            title_bar_height=config.title_bar_height,
            handle_size=config.resize_handle_size,
            handles=[ResizeDirection(name) for name in config.resize_handles],
            on_commit=on_commit,
            on_moved=on_moved,
        )

    @property
    def state(self) -> GestureState:
        return self._state

    @property
    def is_idle(self) -> bool:
        return isinstance(self._state, Idle)

    @property
    def current_bounds(self) -> Bounds:
        return self._bounds

    def hit_test(self, pointer: Point) -> ResizeDirection | HitZone:
        """
        Classify a screen point against the note.

        Corners win over edges; only enabled handles are reported. The top
        handle, when enabled, takes precedence over the title bar.
        """
        bounds = self._bounds
        if not bounds.contains(pointer):
            return HitZone.OUTSIDE

        local = pointer - bounds.position
        grip = self._handle_size
        near_left = local.x < grip
        near_right = local.x >= bounds.width - grip
        near_top = local.y < grip
        near_bottom = local.y >= bounds.height - grip

        candidates = []
        if near_top and near_left:
            candidates.append(ResizeDirection.TOP_LEFT)
        if near_top and near_right:
            candidates.append(ResizeDirection.TOP_RIGHT)
        if near_bottom and near_right:
            candidates.append(ResizeDirection.BOTTOM_RIGHT)
        if near_bottom and near_left:
            candidates.append(ResizeDirection.BOTTOM_LEFT)
        if near_top:
            candidates.append(ResizeDirection.TOP)
        if near_right:
            candidates.append(ResizeDirection.RIGHT)
        if near_bottom:
            candidates.append(ResizeDirection.BOTTOM)
        if near_left:
            candidates.append(ResizeDirection.LEFT)

        for direction in candidates:
            if direction in self._handles:
                return direction

        if local.y < self._title_bar_height:
            return HitZone.TITLE_BAR
        return HitZone.BODY

    def on_pointer_down(
        self,
        pointer: Point,
        target: ResizeDirection | HitZone | None = None,
    ) -> GestureState:
        """
        Start a gesture.

        Args:
            pointer: Screen position of the press
            target: What was pressed; hit-tested from pointer when omitted

        Returns:
            The resulting state (unchanged unless Idle)
        """
        if not self.is_idle:
            return self._state

        if target is None:
            target = self.hit_test(pointer)

        if isinstance(target, ResizeDirection):
            self._state = Resizing(target, pointer, self._bounds)
            logger.debug("Resize started", extra={"direction": target.value})
        elif target is HitZone.TITLE_BAR:
            self._state = Dragging(pointer - self._bounds.position)
            logger.debug("Drag started")
        return self._state

    def on_pointer_move(self, pointer: Point) -> Bounds:
        """Update bounds for the gesture in progress. No-op when Idle."""
        state = self._state
        if isinstance(state, Dragging):
            new_bounds = self._bounds.with_position(pointer - state.offset)
        elif isinstance(state, Resizing):
            new_bounds = apply_resize(
                state.start_bounds,
                state.direction,
                pointer - state.start_pointer,
                self._constraints,
            )
        else:
            return self._bounds

        if new_bounds != self._bounds:
            self._bounds = new_bounds
            if self._on_moved is not None:
                self._on_moved(new_bounds)
        return self._bounds

    def on_pointer_up(self, pointer: Point | None = None) -> Bounds:
        """
        Finish the gesture in progress and commit the bounds.

        Args:
            pointer: Release position; applied as a final move when given

        Returns:
            The committed bounds
        """
        if self.is_idle:
            return self._bounds

        if pointer is not None:
            self.on_pointer_move(pointer)

        finished = type(self._state).__name__
        self._state = IDLE
        logger.debug(
            "Gesture finished",
            extra={"gesture": finished, "bounds": self._bounds},
        )
        self._commit()
        return self._bounds

    def resize_note(self, width: int, height: int) -> Bounds:
        """Resize to the given size, clamped to the constraints, and commit."""
        size = self._constraints.clamp(Size(width, height))
        self._bounds = self._bounds.with_size(size)
        logger.debug("Note resized", extra={"width": size.width, "height": size.height})
        self._commit()
        return self._bounds

    def set_size_constraints(
        self,
        min_width: int,
        min_height: int,
        max_width: int,
        max_height: int,
    ) -> None:
        """
        Replace the size constraints and clamp the current size to them.

        Raises:
            ValidationError: If a minimum is not below its maximum; the
                previous constraints stay in force
        """
        self._constraints = SizeConstraints(min_width, min_height, max_width, max_height)

        clamped = self._constraints.clamp(self._bounds.size)
        if clamped != self._bounds.size:
            self._bounds = self._bounds.with_size(clamped)
            self._commit()

        logger.debug(
            "Size constraints updated",
            extra={"constraints": self._constraints.as_tuple()},
        )

    def get_size_constraints(self) -> tuple[int, int, int, int]:
        """Return (min_width, min_height, max_width, max_height)."""
        return self._constraints.as_tuple()

    def _commit(self) -> None:
        if self._on_commit is not None:
            self._on_commit(self._bounds)
