"""Tests for the per-pixel FXYT evaluator."""

from __future__ import annotations

import logging

import pytest

from fxyt.lang.commands import BLACK, RED, Colour
from fxyt.lang.errors import (
    DebugHaltError,
    DivideByZeroError,
    EvaluationError,
    ModeOutOfRangeError,
    RgbOutOfRangeError,
    StackEmptyError,
    StackOverflowError,
)
from fxyt.lang.evaluator import Machine, evaluate, evaluate_pixel, read_colour, run_sequence
from fxyt.lang.parser import parse


def run(program: str, x: int = 0, y: int = 0, t: int = 0) -> Colour:
    return evaluate(parse(program), x, y, t)


def stack_after(program: str, x: int = 0, y: int = 0, t: int = 0) -> list[int]:
    """Run *program* and return the raw stack instead of a colour."""
    machine = Machine(x=x, y=y, t=t)
    assert run_sequence(machine, parse(program)) is None
    return machine.stack


class TestFinalColour:
    def test_empty_program_is_black(self) -> None:
        assert run("") == BLACK

    def test_xor_of_equal_coordinates(self) -> None:
        assert run("XY^", x=5, y=5) == Colour(0, 0, 0)

    def test_single_value_is_blue(self) -> None:
        assert run("X", x=7) == Colour(0, 0, 7)

    def test_three_values_read_red_green_blue(self) -> None:
        assert run("N10N20N30") == Colour(10, 20, 30)

    def test_extra_values_below_are_ignored(self) -> None:
        assert run("N1N2N3N4") == Colour(2, 3, 4)

    def test_negative_channel_out_of_range(self) -> None:
        with pytest.raises(RgbOutOfRangeError):
            run("N0N1-")

    def test_large_channel_out_of_range(self) -> None:
        with pytest.raises(RgbOutOfRangeError) as info:
            run("N256N0N0")
        assert info.value.channels == (256, 0, 0)

    def test_channel_boundaries_accepted(self) -> None:
        assert run("N255N0N255") == Colour(255, 0, 255)


class TestLiterals:
    def test_zero_digits(self) -> None:
        assert stack_after("000") == [0]
        assert run("000") == Colour(0, 0, 0)

    def test_multi_digit_literal(self) -> None:
        assert stack_after("N123") == [123]

    def test_digit_appends_to_coordinate(self) -> None:
        assert stack_after("X5", x=4) == [45]

    def test_leading_digit_starts_literal(self) -> None:
        assert stack_after("42") == [42]

    def test_separate_literals(self) -> None:
        assert stack_after("N12N34") == [12, 34]


class TestArithmetic:
    @pytest.mark.parametrize(
        ("program", "expected"),
        [
            ("N7N3+", 10),
            ("N7N3-", 4),
            ("N7N3*", 21),
            ("N7N3/", 2),
            ("N7N3%", 1),
            ("N0N7-N2/", -3),
            ("N0N7-N3%", -1),
            ("N7N0N3-%", 1),
        ],
    )
    def test_operations(self, program: str, expected: int) -> None:
        assert stack_after(program) == [expected]

    def test_underflow(self) -> None:
        with pytest.raises(StackEmptyError):
            run("N1+")


class TestDivideByZero:
    def test_mode_zero_raises(self) -> None:
        with pytest.raises(DivideByZeroError):
            run("N5N0/")

    def test_modulus_by_zero_raises(self) -> None:
        with pytest.raises(DivideByZeroError):
            run("N5N0%")

    def test_mode_one_short_circuits_to_black(self) -> None:
        assert run("MN5N0/N255N255N255") == BLACK

    def test_mode_two_short_circuits_to_red(self) -> None:
        assert run("MMN5N0/N1N2N3") == RED

    def test_short_circuit_skips_remaining_commands(self) -> None:
        # The trailing W would halt the program if it were reached.
        result = evaluate_pixel(parse("MN5N0/W"), 0, 0)
        assert result.colour == BLACK
        assert result.short_circuited is True

    def test_short_circuit_crosses_group_boundaries(self) -> None:
        assert run("M[N1[N5N0/]W]W") == BLACK

    def test_short_circuit_skips_range_check(self) -> None:
        assert run("MMN999N5N0/") == RED

    def test_mode_set_inside_group_is_shared(self) -> None:
        assert run("[M]N5N0/") == BLACK


class TestMode:
    def test_third_increment_fails(self) -> None:
        with pytest.raises(ModeOutOfRangeError):
            run("MMM")

    def test_two_increments_allowed(self) -> None:
        assert run("MM") == BLACK


class TestComparisonAndLogic:
    @pytest.mark.parametrize(
        ("program", "expected"),
        [
            ("N3N3=", 1),
            ("N3N4=", 0),
            ("N3N4<", 1),
            ("N4N3<", 0),
            ("N4N3>", 1),
            ("N3N4>", 0),
            ("N0!", 1),
            ("N9!", 0),
            ("N12N10^", 6),
            ("N12N10&", 8),
            ("N12N10|", 14),
        ],
    )
    def test_operations(self, program: str, expected: int) -> None:
        assert stack_after(program) == [expected]

    def test_invert_on_empty_stack(self) -> None:
        with pytest.raises(StackEmptyError):
            run("!")


class TestClamp:
    def test_clamps_high(self) -> None:
        assert stack_after("N300C") == [255]

    def test_clamps_low(self) -> None:
        assert stack_after("N0N5-C") == [0]

    def test_in_range_unchanged(self) -> None:
        assert stack_after("N42C") == [42]


class TestStackOperations:
    def test_duplicate(self) -> None:
        assert stack_after("N7D") == [7, 7]

    def test_pop(self) -> None:
        assert stack_after("N1N2P") == [1]

    def test_swap(self) -> None:
        assert stack_after("N1N2S") == [2, 1]

    def test_rotate_three(self) -> None:
        assert stack_after("N1N2N3R") == [2, 3, 1]

    def test_rotate_leaves_lower_values(self) -> None:
        assert stack_after("N9N1N2N3R") == [9, 2, 3, 1]

    def test_rotate_colour_order(self) -> None:
        assert run("N1N2N3R") == Colour(2, 3, 1)

    @pytest.mark.parametrize("program", ["D", "P", "N1S", "N1N2R"])
    def test_underflow(self, program: str) -> None:
        with pytest.raises(StackEmptyError):
            run(program)


class TestStackDepth:
    def test_eight_values_fit(self) -> None:
        assert len(stack_after("N" * 8)) == 8

    def test_ninth_push_overflows(self) -> None:
        with pytest.raises(StackOverflowError):
            run("N" * 9)

    def test_overflow_raised_at_ninth_not_later(self) -> None:
        # A pop after the ninth push would bring the depth back to 8.
        with pytest.raises(StackOverflowError):
            run("N" * 9 + "P")

    def test_duplicate_can_overflow(self) -> None:
        with pytest.raises(StackOverflowError):
            run("N" * 8 + "D")

    def test_overflow_inside_group(self) -> None:
        with pytest.raises(StackOverflowError):
            run("NNNN[NNNN[NP]]")

    def test_group_shares_stack(self) -> None:
        assert stack_after("N1[N2[N3]]S") == [1, 3, 2]


class TestFrameInterval:
    def test_records_top_without_popping(self) -> None:
        result = evaluate_pixel(parse("N50F"), 0, 0)
        assert result.interval == 50
        assert result.colour == Colour(0, 0, 50)

    def test_last_hint_wins(self) -> None:
        assert evaluate_pixel(parse("N10FPN20F"), 0, 0).interval == 20

    def test_no_hint(self) -> None:
        assert evaluate_pixel(parse("XY^"), 3, 4).interval is None

    def test_empty_stack(self) -> None:
        with pytest.raises(StackEmptyError):
            run("F")


class TestDebugHalt:
    def test_halt_carries_state(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="fxyt.lang.evaluator"):
            with pytest.raises(DebugHaltError) as info:
                run("XYN7W", x=3, y=4, t=5)
        assert (info.value.x, info.value.y, info.value.t) == (3, 4, 5)
        assert info.value.stack == [3, 4, 7]
        assert "Debug halt" in caplog.text

    def test_halt_inside_group(self) -> None:
        with pytest.raises(DebugHaltError):
            run("[[W]]")

    def test_halt_is_an_evaluation_error(self) -> None:
        with pytest.raises(EvaluationError):
            run("W")


class TestIsolation:
    def test_fresh_state_per_pixel(self) -> None:
        commands = parse("MXY+")
        assert evaluate(commands, 1, 2) == Colour(0, 0, 3)
        # Mode from the first call must not leak: a second M is still legal.
        assert evaluate(commands, 1, 2) == Colour(0, 0, 3)

    def test_time_axis(self) -> None:
        assert evaluate(parse("T"), 0, 0, 9) == Colour(0, 0, 9)


class TestReadColour:
    def test_defaults_missing_channels(self) -> None:
        assert read_colour([4, 5]) == Colour(0, 4, 5)

    def test_empty(self) -> None:
        assert read_colour([]) == BLACK
