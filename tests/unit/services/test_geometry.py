"""
Unit Tests for the Geometry Controller.

Drives the drag/resize state machine with synthetic pointer events and
checks bounds, state transitions and commit callbacks.
"""

import pytest

from stickynotes.core.exceptions import ValidationError
from stickynotes.models.note import Note
from stickynotes.services.geometry import (
    Bounds,
    Dragging,
    GeometryController,
    HitZone,
    Idle,
    Point,
    ResizeDirection,
    Resizing,
    Size,
    SizeConstraints,
    apply_resize,
)

ALL_HANDLES = tuple(ResizeDirection)


@pytest.fixture
def controller(commits, moves) -> GeometryController:
    """Controller for a default 200x150 note at (100, 100), bottom-right handle only."""
    return GeometryController(
        Bounds(100, 100, 200, 150),
        on_commit=commits.append,
        on_moved=moves.append,
    )


class TestSizeConstraints:
    """Tests for the size range value object."""

    def test_defaults(self):
        assert SizeConstraints().as_tuple() == (50, 50, 9999, 9999)

    def test_clamp(self):
        constraints = SizeConstraints(100, 100, 500, 400)
        assert constraints.clamp(Size(20, 1000)) == Size(100, 400)
        assert constraints.clamp(Size(300, 200)) == Size(300, 200)

    def test_clamp_is_idempotent(self):
        constraints = SizeConstraints(100, 100, 500, 400)
        once = constraints.clamp(Size(-5, 9000))
        assert constraints.clamp(once) == once

    @pytest.mark.parametrize(
        "values",
        [(200, 50, 200, 9999), (50, 300, 9999, 100), (600, 50, 500, 9999)],
    )
    def test_min_not_below_max_raises(self, values):
        with pytest.raises(ValidationError) as exc_info:
            SizeConstraints(*values)
        assert exc_info.value.code == "VAL_VALIDATION_ERROR"


class TestBounds:
    """Tests for the bounds value object."""

    def test_from_note(self):
        note = Note.create()
        note.x, note.y, note.width, note.height = 10, 20, 300, 400
        assert Bounds.from_note(note) == Bounds(10, 20, 300, 400)

    def test_contains_is_half_open(self):
        bounds = Bounds(0, 0, 10, 10)
        assert bounds.contains(Point(0, 0))
        assert bounds.contains(Point(9, 9))
        assert not bounds.contains(Point(10, 5))
        assert not bounds.contains(Point(-1, 5))


class TestApplyResize:
    """Tests for the pure resize computation."""

    def test_bottom_right_grows(self):
        start = Bounds(100, 100, 200, 150)
        result = apply_resize(start, ResizeDirection.BOTTOM_RIGHT, Point(50, 450), SizeConstraints())
        assert result == Bounds(100, 100, 250, 600)

    def test_bottom_right_clamps_to_maximum(self):
        start = Bounds(100, 100, 200, 150)
        constraints = SizeConstraints(100, 100, 800, 600)
        result = apply_resize(start, ResizeDirection.BOTTOM_RIGHT, Point(50, 700), constraints)
        assert result == Bounds(100, 100, 250, 600)

    def test_top_left_moves_origin(self):
        start = Bounds(100, 100, 200, 150)
        result = apply_resize(start, ResizeDirection.TOP_LEFT, Point(20, 20), SizeConstraints())
        assert result == Bounds(120, 120, 180, 130)

    def test_left_clamp_pins_right_edge(self):
        start = Bounds(100, 100, 200, 150)
        result = apply_resize(start, ResizeDirection.LEFT, Point(180, 0), SizeConstraints())
        assert result.width == 50
        assert result.x + result.width == start.x + start.width

    def test_top_clamp_pins_bottom_edge(self):
        start = Bounds(100, 100, 200, 150)
        result = apply_resize(start, ResizeDirection.TOP, Point(0, 140), SizeConstraints())
        assert result.height == 50
        assert result.y + result.height == start.y + start.height

    def test_edge_handles_leave_other_axis_alone(self):
        start = Bounds(100, 100, 200, 150)
        result = apply_resize(start, ResizeDirection.RIGHT, Point(30, 70), SizeConstraints())
        assert result == Bounds(100, 100, 230, 150)

    def test_max_clamp_on_right(self):
        start = Bounds(100, 100, 200, 150)
        result = apply_resize(start, ResizeDirection.BOTTOM_RIGHT, Point(500, 500), SizeConstraints(50, 50, 300, 300))
        assert result == Bounds(100, 100, 300, 300)


class TestHitTest:
    """Tests for pointer classification."""

    def test_outside(self, controller):
        assert controller.hit_test(Point(50, 50)) is HitZone.OUTSIDE

    def test_title_bar(self, controller):
        assert controller.hit_test(Point(150, 110)) is HitZone.TITLE_BAR

    def test_body(self, controller):
        assert controller.hit_test(Point(150, 200)) is HitZone.BODY

    def test_bottom_right_handle(self, controller):
        assert controller.hit_test(Point(295, 245)) is ResizeDirection.BOTTOM_RIGHT

    def test_disabled_edge_falls_through(self, controller):
        assert controller.hit_test(Point(295, 180)) is HitZone.BODY

    def test_corners_win_over_edges(self):
        controller = GeometryController(Bounds(0, 0, 200, 150), handles=ALL_HANDLES)
        assert controller.hit_test(Point(2, 2)) is ResizeDirection.TOP_LEFT
        assert controller.hit_test(Point(197, 147)) is ResizeDirection.BOTTOM_RIGHT
        assert controller.hit_test(Point(100, 2)) is ResizeDirection.TOP
        assert controller.hit_test(Point(2, 75)) is ResizeDirection.LEFT

    def test_top_handle_beats_title_bar(self):
        controller = GeometryController(Bounds(0, 0, 200, 150), handles=[ResizeDirection.TOP])
        assert controller.hit_test(Point(100, 5)) is ResizeDirection.TOP
        assert controller.hit_test(Point(100, 20)) is HitZone.TITLE_BAR


class TestDragging:
    """Tests for title bar drags."""

    def test_drag_moves_note(self, controller, commits, moves):
        state = controller.on_pointer_down(Point(150, 110))
        assert state == Dragging(Point(50, 10))

        controller.on_pointer_move(Point(250, 310))
        assert controller.current_bounds == Bounds(200, 300, 200, 150)
        assert moves == [Bounds(200, 300, 200, 150)]
        assert commits == []

        controller.on_pointer_up()
        assert controller.is_idle
        assert commits == [Bounds(200, 300, 200, 150)]

    def test_drag_is_not_clamped_to_screen(self, controller):
        controller.on_pointer_down(Point(150, 110))
        controller.on_pointer_move(Point(10, 5))
        assert controller.current_bounds.position == Point(-40, -5)

    def test_release_position_is_applied(self, controller, commits):
        controller.on_pointer_down(Point(150, 110))
        controller.on_pointer_up(Point(160, 120))
        assert commits == [Bounds(110, 110, 200, 150)]

    def test_unchanged_move_does_not_notify(self, controller, moves):
        controller.on_pointer_down(Point(150, 110))
        controller.on_pointer_move(Point(150, 110))
        assert moves == []


class TestResizing:
    """Tests for handle resizes."""

    def test_bottom_right_resize(self, controller, commits):
        state = controller.on_pointer_down(Point(290, 240))
        assert isinstance(state, Resizing)
        assert state.direction is ResizeDirection.BOTTOM_RIGHT

        controller.on_pointer_move(Point(340, 690))
        controller.on_pointer_up()

        assert controller.current_bounds == Bounds(100, 100, 250, 600)
        assert commits == [Bounds(100, 100, 250, 600)]

    def test_resize_is_relative_to_gesture_start(self, controller):
        controller.on_pointer_down(Point(290, 240))
        controller.on_pointer_move(Point(400, 400))
        controller.on_pointer_move(Point(300, 250))
        assert controller.current_bounds.size == Size(210, 160)

    def test_resize_clamps_to_minimum(self, controller):
        controller.on_pointer_down(Point(290, 240))
        controller.on_pointer_move(Point(0, 0))
        assert controller.current_bounds.size == Size(50, 50)

    def test_explicit_top_left_target(self, commits):
        controller = GeometryController(Bounds(100, 100, 200, 150), on_commit=commits.append)
        controller.on_pointer_down(Point(100, 100), ResizeDirection.TOP_LEFT)
        controller.on_pointer_up(Point(120, 120))
        assert commits == [Bounds(120, 120, 180, 130)]


class TestStateMachine:
    """Tests for state transitions."""

    def test_starts_idle(self, controller):
        assert controller.state == Idle()

    def test_body_press_stays_idle(self, controller):
        assert controller.on_pointer_down(Point(150, 200)) == Idle()

    def test_outside_press_stays_idle(self, controller):
        assert controller.on_pointer_down(Point(0, 0)) == Idle()

    def test_press_during_gesture_is_ignored(self, controller):
        first = controller.on_pointer_down(Point(150, 110))
        assert controller.on_pointer_down(Point(290, 240)) == first

    def test_move_while_idle_is_noop(self, controller, moves):
        controller.on_pointer_move(Point(500, 500))
        assert controller.current_bounds == Bounds(100, 100, 200, 150)
        assert moves == []

    def test_release_while_idle_does_not_commit(self, controller, commits):
        controller.on_pointer_up()
        assert commits == []


class TestProgrammaticResize:
    """Tests for resize_note() and constraint updates."""

    def test_initial_size_is_clamped(self):
        controller = GeometryController(Bounds(0, 0, 10, 20000))
        assert controller.current_bounds.size == Size(50, 9999)

    def test_resize_note_clamps_and_commits(self, controller, commits):
        bounds = controller.resize_note(10, 20000)
        assert bounds == Bounds(100, 100, 50, 9999)
        assert commits == [bounds]

    def test_set_constraints_clamps_and_commits(self, controller, commits):
        controller.set_size_constraints(50, 50, 150, 100)
        assert controller.current_bounds.size == Size(150, 100)
        assert commits == [Bounds(100, 100, 150, 100)]
        assert controller.get_size_constraints() == (50, 50, 150, 100)

    def test_set_constraints_without_change_does_not_commit(self, controller, commits):
        controller.set_size_constraints(100, 100, 1000, 1000)
        assert commits == []

    def test_invalid_constraints_keep_previous(self, controller, commits):
        with pytest.raises(ValidationError):
            controller.set_size_constraints(300, 50, 200, 9999)
        assert controller.get_size_constraints() == (50, 50, 9999, 9999)
        assert commits == []


class TestFromConfig:
    """Tests for building a controller from geometry.yaml."""

    def test_uses_configured_values(self):
        from stickynotes.core.config import get_app_config

        controller = GeometryController.from_config(
            Bounds(100, 100, 200, 150),
            get_app_config().geometry,
        )
        assert controller.get_size_constraints() == (50, 50, 9999, 9999)
        assert controller.hit_test(Point(295, 245)) is ResizeDirection.BOTTOM_RIGHT
