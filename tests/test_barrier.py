"""Tests for the countdown barrier."""

import pytest

from task_relay.barrier import Barrier, BarrierOptions, BarrierPolicy, BarrierState, make_barrier
from task_relay.errors import InvalidArgument, SignalError


class TestFailFast:
    """Tests for the default fail-fast policy."""

    def test_fires_after_count_signals(self, recorder):
        """Test the callback fires only after the last signal, with no error."""
        signal = make_barrier(3, recorder)

        signal()
        signal()
        assert recorder.count == 0

        signal()
        assert recorder.calls == [(None,)]

    def test_first_error_fires_immediately(self, recorder):
        """Test the first error short-circuits and later signals are no-ops."""
        err_a = SignalError("a")
        signal = make_barrier(3, recorder)

        signal(err_a)
        assert recorder.calls == [(err_a,)]

        signal()
        signal()
        signal(SignalError("late"))
        assert recorder.calls == [(err_a,)]

    def test_error_on_middle_signal(self, recorder):
        """Test an error on a middle signal fires with that error."""
        err = SignalError("middle")
        signal = make_barrier(3, None, recorder)

        signal()
        signal(err)
        signal()

        assert recorder.calls == [(err,)]

    def test_error_on_final_signal(self, recorder):
        """Test the final signal's error is passed through."""
        signal = make_barrier(2, recorder)

        signal()
        signal("final")

        assert recorder.calls == [("final",)]

    def test_count_of_one(self, recorder):
        """Test a single-signal barrier fires on the first call."""
        signal = make_barrier(1, recorder)
        signal()
        signal()

        assert recorder.calls == [(None,)]

    def test_signals_after_completion_ignored(self, recorder):
        """Test extra signals after firing never re-fire."""
        signal = make_barrier(2, recorder)
        for _ in range(5):
            signal()

        assert recorder.count == 1


class TestAccumulate:
    """Tests for the error-accumulating policy."""

    def test_collects_errors_in_order(self, recorder):
        """Test every error is reported in call order."""
        e1, e2 = SignalError("1"), SignalError("2")
        signal = make_barrier(2, {"accumulate_errors": True}, recorder)

        signal(e1)
        assert recorder.count == 0

        signal(e2)
        assert recorder.calls == [([e1, e2],)]

    def test_no_errors_gives_empty_list(self, recorder):
        """Test a clean run reports an empty list."""
        signal = make_barrier(2, BarrierOptions(accumulate_errors=True), recorder)

        signal()
        signal()

        assert recorder.calls == [([],)]

    def test_mixed_signals(self, recorder):
        """Test falsy signals count without adding errors."""
        signal = make_barrier(4, {"accumulateErrors": True}, recorder)

        signal()
        signal("x")
        signal(None)
        assert recorder.count == 0
        signal("y")

        assert recorder.calls == [(["x", "y"],)]

    def test_no_early_termination(self, recorder):
        """Test errors do not short-circuit the count."""
        signal = make_barrier(3, {"accumulate_errors": True}, recorder)

        signal("a")
        signal("b")
        assert recorder.count == 0

    def test_terminal_after_firing(self, recorder):
        """Test signals after firing are ignored."""
        signal = make_barrier(1, {"accumulate_errors": True}, recorder)
        signal("a")
        signal("b")

        assert recorder.calls == [(["a"],)]


class TestBarrierState:
    """Tests for the Barrier object behind the signal function."""

    def test_signal_exposes_barrier(self, recorder):
        """Test the returned signal is bound to a Barrier."""
        signal = make_barrier(2, recorder)
        barrier = signal.__self__

        assert isinstance(barrier, Barrier)
        assert barrier.remaining == 2
        assert barrier.state == BarrierState.WAITING
        assert barrier.policy == BarrierPolicy.FAIL_FAST

        signal()
        assert barrier.remaining == 1

        signal()
        assert barrier.state == BarrierState.TERMINAL

    def test_accumulated_errors_visible(self, recorder):
        """Test collected errors are readable before firing."""
        signal = make_barrier(3, {"accumulate_errors": True}, recorder)
        signal("a")

        assert signal.__self__.errors == ["a"]
        assert signal.__self__.policy == BarrierPolicy.ACCUMULATE

    def test_barrier_is_callable(self, recorder):
        """Test a Barrier instance can be called like its signal."""
        barrier = Barrier(1, recorder)
        barrier()

        assert recorder.calls == [(None,)]


class TestBarrierValidation:
    """Tests for argument validation."""

    @pytest.mark.parametrize("count", [0, -1, 1.5, "3", None, True])
    def test_invalid_count(self, recorder, count):
        """Test non-positive or non-integer counts are rejected."""
        with pytest.raises(InvalidArgument):
            make_barrier(count, recorder)

    def test_missing_callback(self):
        """Test a missing callback is rejected."""
        with pytest.raises(InvalidArgument):
            make_barrier(2)

    def test_non_callable_callback(self):
        """Test a non-callable callback is rejected."""
        with pytest.raises(InvalidArgument):
            make_barrier(2, {}, "nope")

    def test_invalid_options(self, recorder):
        """Test options must be a mapping or BarrierOptions."""
        with pytest.raises(InvalidArgument):
            make_barrier(2, 42, recorder)


class TestBarrierOptions:
    """Tests for BarrierOptions."""

    def test_default_policy(self):
        """Test the default policy is fail-fast."""
        assert BarrierOptions().policy == BarrierPolicy.FAIL_FAST

    def test_coerce_none(self):
        """Test None coerces to defaults."""
        assert BarrierOptions.coerce(None) == BarrierOptions()

    def test_coerce_mapping(self):
        """Test a mapping is coerced."""
        assert BarrierOptions.coerce({"accumulate_errors": 1}).accumulate_errors is True
