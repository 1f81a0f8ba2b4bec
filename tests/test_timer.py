import time

from policydeploy.timer import Timer, time_since_epoch_us


def test_ns_is_monotonic():
    t = Timer(0.01)
    first = t.ns()
    second = t.ns()
    assert 0 <= first <= second


def test_unit_conversions_are_consistent():
    t = Timer(0.01)
    ns_before = t.ns()
    ms = t.ms()
    ns_after = t.ns()
    assert ns_before / 1e6 <= ms <= ns_after / 1e6
    assert t.us() >= ns_after / 1e3
    assert t.seconds() >= ns_after / 1e9


def test_wait_sleeps_for_period():
    t = Timer(0.02)
    before = t.ns()
    t.wait()
    assert t.ns() - before >= 18_000_000


def test_wait_without_period_returns_quickly():
    t = Timer()
    assert t.period == 0.0
    begin = time.monotonic()
    t.wait()
    assert time.monotonic() - begin < 0.05


def test_elapsed_measures_and_resets():
    t = Timer(0.001)
    time.sleep(0.01)
    first = t.elapsed()
    second = t.elapsed()
    assert first >= 0.009
    assert 0 <= second < first


def test_elapsed_us():
    t = Timer(0.001)
    time.sleep(0.005)
    assert t.elapsed_us() >= 4500


def test_start_resets_reference():
    t = Timer(0.001)
    time.sleep(0.01)
    before = t.ns()
    t.start()
    assert t.ns() < before


def test_time_since_epoch_us():
    low = int(time.time() * 1e6) - 1000
    value = time_since_epoch_us()
    high = int(time.time() * 1e6) + 1000
    assert low <= value <= high