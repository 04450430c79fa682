import pytest

from quadwalk.hardware.absolute_truths import LED0_OFF_L
from quadwalk.hardware.errors import PulseLimitError, RegisterWriteError, TransitionAborted
from quadwalk.hardware.pacing import NO_WAIT, PacingPolicy
from quadwalk.hardware.pulse import pulse_to_counter
from quadwalk.layer2.poses import pose
from quadwalk.layer3.transition import (
    Interpolation,
    interpolate_pulse,
    plan_transition,
    transition,
)

ZEROS = (0,) * 12


def moved_channels(start, goal):
    return [i for i in range(12) if start[i] != goal[i]]


def test_single_step_writes_goal_once(fake_bus, wide_device):
    goal = (100,) + ZEROS[1:]
    report = transition(wide_device, 1, ZEROS, goal, pacing=NO_WAIT)

    assert fake_bus.channel_counters(0) == [pulse_to_counter(100)]
    assert len(fake_bus.writes) == 2
    assert report.ok
    assert report.writes == 2
    assert wide_device.positions[0] == 100


def test_unchanged_channels_are_never_written(fake_bus, device):
    high, low = pose("high"), pose("low")
    report = transition(device, 20, high, low, pacing=NO_WAIT)

    moved = moved_channels(high, low)
    for ch in range(12):
        if ch in moved:
            assert len(fake_bus.channel_counters(ch)) == 20
        else:
            assert fake_bus.channel_counters(ch) == []
            assert device.positions[ch] is None
    assert report.writes == 2 * 20 * len(moved)


def test_end_state_is_exact_even_when_range_does_not_divide(fake_bus, device):
    # channel 10: 1500 -> 650, 850 / 20 is not whole
    high, low = pose("high"), pose("low")
    transition(device, 20, high, low, pacing=NO_WAIT)

    for ch in moved_channels(high, low):
        assert fake_bus.channel_counters(ch)[-1] == pulse_to_counter(low[ch])
        assert device.positions[ch] == low[ch]


def test_truncating_interpolation_keeps_quirk():
    start = ZEROS
    goal = (10,) + ZEROS[1:]
    path = [p[0] for p in plan_transition(start, goal, 20)]
    # trunc(10 / 20) == 0, so nothing moves until the last step
    assert path == [0] * 19 + [10]


def test_truncating_path_for_ch10():
    assert interpolate_pulse(1500, 650, 1, 20) == 1458
    assert interpolate_pulse(1500, 650, 19, 20) == 702
    assert interpolate_pulse(1500, 650, 20, 20) == 650


def test_rounding_interpolation():
    path = [interpolate_pulse(0, 10, k, 20, Interpolation.ROUND) for k in range(1, 21)]
    assert path[0] == 1
    assert path[-1] == 10
    assert all(a <= b for a, b in zip(path, path[1:]))
    assert interpolate_pulse(1500, 650, 1, 20, "round") == 1457


def test_plan_ends_on_goal():
    plan = plan_transition(pose("far"), pose("close"), 7, Interpolation.ROUND)
    assert len(plan) == 7
    assert plan[-1] == pose("close")


def test_pacing_after_every_channel_write(device, sleeps):
    pacing = PacingPolicy(sleep=sleeps)
    high, low = pose("high"), pose("low")
    transition(device, 5, high, low, pacing=pacing)

    assert sleeps.calls == [0.002] * (5 * len(moved_channels(high, low)))


def test_pulse_outside_limits_is_refused_before_writing(fake_bus, device):
    start = pose("high")
    goal = list(start)
    goal[1] = 2000          # channel 1 tops out at 1500
    with pytest.raises(PulseLimitError) as err:
        transition(device, 20, start, goal, pacing=NO_WAIT)

    assert err.value.channel == 1
    assert err.value.pulse_us == 1525
    assert fake_bus.writes == []


def test_write_failure_aborts_transition(fake_bus, device):
    fake_bus.fail_register(LED0_OFF_L + 4 * 1)
    with pytest.raises(TransitionAborted) as err:
        transition(device, 20, pose("high"), pose("low"), pacing=NO_WAIT)

    report = err.value.report
    assert len(report.failures) == 1
    assert isinstance(err.value.cause, RegisterWriteError)
    assert err.value.cause.register == LED0_OFF_L + 4 * 1
    assert device.positions[1] is None


def test_write_failure_reported_when_not_aborting(fake_bus, device):
    fake_bus.fail_register(LED0_OFF_L + 4 * 1)
    high, low = pose("high"), pose("low")
    report = transition(device, 20, high, low, pacing=NO_WAIT, abort_on_write_failure=False)

    assert not report.ok
    assert len(report.failures) == 20
    assert report.positions[1] is None
    for ch in moved_channels(high, low):
        if ch != 1:
            assert report.positions[ch] == low[ch]


@pytest.mark.parametrize("steps", [0, -3])
def test_steps_must_be_positive(device, steps):
    with pytest.raises(ValueError):
        transition(device, steps, pose("high"), pose("low"), pacing=NO_WAIT)


def test_poses_must_have_twelve_channels(device):
    with pytest.raises(ValueError):
        transition(device, 20, pose("high")[:11], pose("low"), pacing=NO_WAIT)
