"""Tests for the rule-based coach."""

from unittest.mock import patch

import numpy as np
import pytest

from snake_coach.advisor import (
    DANGER_MESSAGES,
    GOOD_MOVE_MESSAGES,
    TRAP_MESSAGES,
    Advisor,
    BoardSnapshot,
    HintCategory,
    count_blocked,
    is_blocked,
    is_good_move,
    is_self_trap,
    is_wall_danger,
)
from snake_coach.config import AdvisorConfig
from snake_coach.snake import Direction


class FakeClock:
    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


class FixedRng:
    """Always picks the first message of a pool."""

    def integers(self, n):
        return 0


class CyclingRng:
    def __init__(self) -> None:
        self.calls = 0

    def integers(self, n):
        self.calls += 1
        return (self.calls - 1) % n


def _snap(body, direction, cols=20, rows=20) -> BoardSnapshot:
    return BoardSnapshot(
        head=body[0], direction=direction, body=tuple(body), cols=cols, rows=rows,
    )


def _straight(head, direction, length):
    dx, dy = direction.value
    x, y = head
    return [(x - dx * i, y - dy * i) for i in range(length)]


# Head at (10, 10) moving LEFT, hemmed in on three sides by its own body.
TRAPPED_BODY = [(10, 10), (11, 10), (11, 11), (10, 11), (9, 11), (9, 10)]

# Twelve segments, head at (14, 5) moving LEFT toward the center (10, 10).
LONG_BODY = [(x, 5) for x in range(14, 20)] + [(19, y) for y in range(6, 12)]


class TestPredicates:
    def test_is_blocked(self):
        body = {(3, 3)}
        assert is_blocked((-1, 0), 10, 10, body)
        assert is_blocked((10, 0), 10, 10, body)
        assert is_blocked((0, 10), 10, 10, body)
        assert is_blocked((3, 3), 10, 10, body)
        assert not is_blocked((4, 3), 10, 10, body)

    def test_count_blocked_corner(self):
        assert count_blocked((0, 0), 10, 10, set()) == 2

    @pytest.mark.parametrize(
        ("head", "direction", "expected"),
        [
            ((17, 10), Direction.RIGHT, True),
            ((16, 10), Direction.RIGHT, False),
            ((2, 10), Direction.LEFT, True),
            ((3, 10), Direction.LEFT, False),
            ((10, 17), Direction.DOWN, True),
            ((10, 16), Direction.DOWN, False),
            ((10, 2), Direction.UP, True),
            ((10, 3), Direction.UP, False),
        ],
    )
    def test_wall_danger_on_axis_of_travel(self, head, direction, expected):
        snapshot = _snap(_straight(head, direction, 1), direction)
        assert is_wall_danger(snapshot, 3) is expected

    def test_wall_danger_ignores_other_axis(self):
        # Hugging the top wall while moving right is not a danger.
        snapshot = _snap(_straight((10, 0), Direction.RIGHT, 3), Direction.RIGHT)
        assert not is_wall_danger(snapshot)

    def test_self_trap(self):
        assert is_self_trap(_snap(TRAPPED_BODY, Direction.LEFT))

    def test_open_head_not_trapped(self):
        assert not is_self_trap(_snap(_straight((10, 10), Direction.RIGHT, 3), Direction.RIGHT))

    def test_corner_plus_body_is_trap(self):
        body = [(0, 0), (1, 0)]
        assert is_self_trap(_snap(body, Direction.LEFT))

    def test_good_move(self):
        assert is_good_move(_snap(LONG_BODY, Direction.LEFT))

    def test_good_move_needs_more_than_ten_segments(self):
        assert not is_good_move(_snap(LONG_BODY[:10], Direction.LEFT))
        assert is_good_move(_snap(LONG_BODY[:11], Direction.LEFT))

    def test_good_move_needs_progress_toward_center(self):
        body = [(x, 5) for x in range(14, 2, -1)]
        assert not is_good_move(_snap(body, Direction.RIGHT))

    def test_good_move_needs_open_space(self):
        # Next cell (13, 5) has body on three sides.
        body = LONG_BODY + [(13, 6), (12, 6), (12, 5), (12, 4), (13, 4)]
        assert not is_good_move(_snap(body, Direction.LEFT))


class TestAnalyze:
    def setup_method(self):
        self.clock = FakeClock()
        self.advisor = Advisor(rng=FixedRng(), clock=self.clock)

    def test_wall_danger_scenario(self):
        body = _straight((17, 10), Direction.RIGHT, 3)
        hint = self.advisor.analyze(_snap(body, Direction.RIGHT))
        assert hint is not None
        assert hint.category is HintCategory.DANGER
        assert hint.text in DANGER_MESSAGES

    def test_self_trap_scenario(self):
        hint = self.advisor.analyze(_snap(TRAPPED_BODY, Direction.LEFT))
        assert hint.category is HintCategory.WARNING
        assert hint.text in TRAP_MESSAGES

    def test_trap_wins_before_good_move_is_checked(self):
        with patch("snake_coach.advisor.is_good_move") as good_move:
            hint = self.advisor.analyze(_snap(TRAPPED_BODY, Direction.LEFT))
        assert hint.category is HintCategory.WARNING
        good_move.assert_not_called()

    def test_danger_wins_over_trap(self):
        # Cornered at the left wall and moving into it.
        body = [(1, 5), (2, 5), (2, 6), (1, 6), (0, 6), (0, 5)]
        hint = self.advisor.analyze(_snap(body, Direction.LEFT))
        assert hint.category is HintCategory.DANGER

    def test_good_move_scenario(self):
        hint = self.advisor.analyze(_snap(LONG_BODY, Direction.LEFT))
        assert hint.category is HintCategory.SUCCESS
        assert hint.text in GOOD_MOVE_MESSAGES

    def test_no_rule_no_hint(self):
        body = _straight((10, 10), Direction.RIGHT, 3)
        assert self.advisor.analyze(_snap(body, Direction.RIGHT)) is None
        assert self.advisor.state.last_text == ""

    def test_hint_records_state(self):
        self.clock.now = 1234.0
        hint = self.advisor.analyze(_snap(TRAPPED_BODY, Direction.LEFT))
        assert self.advisor.state.last_text == hint.text
        assert self.advisor.state.last_timestamp_ms == 1234.0
        assert hint.timestamp_ms == 1234.0


class TestCooldown:
    def setup_method(self):
        self.clock = FakeClock()
        self.advisor = Advisor(rng=CyclingRng(), clock=self.clock)
        self.danger = _snap(_straight((17, 10), Direction.RIGHT, 3), Direction.RIGHT)

    def test_blocked_within_cooldown(self):
        assert self.advisor.analyze(self.danger) is not None
        self.clock.now = 2999.0
        assert self.advisor.analyze(self.danger) is None

    def test_allowed_after_cooldown(self):
        first = self.advisor.analyze(self.danger)
        self.clock.now = 3000.0
        second = self.advisor.analyze(self.danger)
        assert second is not None
        assert second.text != first.text

    def test_custom_cooldown(self):
        advisor = Advisor(AdvisorConfig(cooldown_ms=100), rng=CyclingRng(), clock=self.clock)
        assert advisor.analyze(self.danger) is not None
        self.clock.now = 100.0
        assert advisor.analyze(self.danger) is not None

    def test_notify_bypasses_cooldown(self):
        self.advisor.analyze(self.danger)
        self.clock.now = 10.0
        hint = self.advisor.notify("⏸ Game Paused")
        assert hint.text == "⏸ Game Paused"
        assert hint.category is HintCategory.INFO

    def test_notify_restarts_cooldown(self):
        self.advisor.analyze(self.danger)
        self.clock.now = 10.0
        self.advisor.notify("hello")
        self.clock.now = 3005.0
        assert self.advisor.analyze(self.danger) is None
        self.clock.now = 3010.0
        assert self.advisor.analyze(self.danger) is not None


class TestRepetition:
    def setup_method(self):
        self.clock = FakeClock()
        self.advisor = Advisor(rng=FixedRng(), clock=self.clock)
        self.danger = _snap(_straight((17, 10), Direction.RIGHT, 3), Direction.RIGHT)

    def test_identical_text_suppressed_across_cooldown(self):
        assert self.advisor.analyze(self.danger) is not None
        self.clock.now = 10_000.0
        assert self.advisor.analyze(self.danger) is None
        assert self.advisor.state.last_timestamp_ms == 0.0

    def test_other_message_clears_repetition(self):
        self.advisor.analyze(self.danger)
        self.clock.now = 10.0
        self.advisor.notify("Something else")
        self.clock.now = 5000.0
        assert self.advisor.analyze(self.danger) is not None

    def test_notify_may_repeat(self):
        a = self.advisor.notify("same")
        b = self.advisor.notify("same")
        assert a.text == b.text == "same"

    def test_reset_clears_state(self):
        self.advisor.analyze(self.danger)
        self.advisor.reset()
        assert self.advisor.state.last_text == ""
        assert self.advisor.state.last_timestamp_ms is None
        assert self.advisor.analyze(self.danger) is not None

    def test_never_two_identical_consecutive_hints(self):
        advisor = Advisor(rng=np.random.default_rng(0), clock=self.clock)
        shown = []
        for step in range(200):
            self.clock.now = step * 3000.0
            hint = advisor.analyze(self.danger)
            if hint is not None:
                shown.append(hint.text)
        assert shown
        assert all(a != b for a, b in zip(shown, shown[1:]))


class TestGameOver:
    def setup_method(self):
        self.advisor = Advisor(rng=FixedRng(), clock=FakeClock())

    @pytest.mark.parametrize(
        ("cause", "fragment"),
        [
            ("wall", "Wall collision! Final score: 40"),
            ("self", "Self collision! Final score: 40"),
            ("board_full", "Board cleared! Final score: 40"),
            (None, "Game Over! Final score: 40"),
        ],
    )
    def test_messages(self, cause, fragment):
        hint = self.advisor.on_game_over(40, cause)
        assert fragment in hint.text
        assert hint.category is HintCategory.DANGER

    def test_accepts_enum_cause(self):
        from snake_coach.engine import EndCause

        hint = self.advisor.on_game_over(10, EndCause.SELF)
        assert "Self collision" in hint.text

    def test_to_dict(self):
        hint = self.advisor.on_game_over(0, "wall")
        assert hint.to_dict() == {"text": hint.text, "category": "danger"}
