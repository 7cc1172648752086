from random import Random

from cpusched.workload import (
    SCENARIOS,
    bimodal_workload,
    identical_workload,
    random_workload,
    wide_priority_workload,
)


def test_same_seed_same_workload():
    assert random_workload(20, Random(42)) == random_workload(20, Random(42))


def test_random_workload_ranges():
    procs = random_workload(50, Random(1))
    assert sorted(p.pid for p in procs) == list(range(1, 51))
    assert [p.arrival_time for p in procs] == sorted(p.arrival_time for p in procs)
    assert all(0 <= p.arrival_time <= 100 for p in procs)
    assert all(1 <= p.burst_time <= 20 for p in procs)
    assert all(1 <= p.priority <= 10 for p in procs)


def test_identical_workload():
    procs = identical_workload(10, Random(2))
    assert all(p.arrival_time == 0 and p.burst_time == 10 for p in procs)
    assert [p.pid for p in procs] == list(range(1, 11))


def test_bimodal_bursts_are_short_or_long():
    procs = bimodal_workload(40, Random(3))
    assert all(1 <= p.burst_time <= 5 or 50 <= p.burst_time <= 100 for p in procs)
    assert any(p.burst_time <= 5 for p in procs)
    assert any(p.burst_time >= 50 for p in procs)


def test_wide_priorities():
    procs = wide_priority_workload(20, Random(4))
    assert all(1 <= p.priority <= 100 for p in procs)
    assert all(0 <= p.arrival_time <= 50 for p in procs)


def test_scenarios_build_requested_sizes():
    for factory, count in SCENARIOS.values():
        assert len(factory(count, Random(0))) == count
