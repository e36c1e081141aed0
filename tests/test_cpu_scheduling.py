import pytest

from ossim.cpu_scheduling import (
    GanttChart,
    Process,
    fcfs,
    priority_nonpreemptive,
    priority_preemptive,
    round_robin,
    sjf,
    srtf,
)

SAMPLE = [
    Process(1, 0, 5, 3),
    Process(2, 1, 3, 1),
    Process(3, 2, 8, 4),
    Process(4, 3, 6, 2),
    Process(5, 10, 2, 1),
]

ALGORITHMS = [
    fcfs,
    sjf,
    srtf,
    priority_nonpreemptive,
    priority_preemptive,
    lambda ps: round_robin(ps, 2),
]


@pytest.mark.parametrize("algorithm", ALGORITHMS)
def test_result_invariants(algorithm):
    schedule = algorithm(SAMPLE)
    assert sorted(r.pid for r in schedule.results) == [p.pid for p in SAMPLE]
    for r in schedule.results:
        assert r.turnaround == r.waiting + r.burst
        assert r.completion == r.arrival + r.turnaround


@pytest.mark.parametrize("algorithm", ALGORITHMS[:5])
def test_no_negative_waiting_and_no_early_start(algorithm):
    schedule = algorithm(SAMPLE)
    assert all(r.waiting >= 0 for r in schedule.results)


@pytest.mark.parametrize("algorithm", ALGORITHMS)
def test_gantt_times_monotonic_and_end_at_last_completion(algorithm):
    schedule = algorithm(SAMPLE)
    times = list(schedule.gantt.times)
    assert times == sorted(times)
    assert times[-1] == max(r.completion for r in schedule.results)
    assert len(times) == len(schedule.gantt.pids) + 1


def test_fcfs_orders_by_arrival_then_burst():
    procs = [Process(7, 4, 1), Process(8, 0, 9), Process(9, 0, 2)]
    schedule = fcfs(procs)
    assert [r.pid for r in schedule.results] == [9, 8, 7]
    assert schedule.gantt.pids == (9, 8, 7)


def test_fcfs_idle_until_arrival():
    procs = [Process(1, 5, 3)]
    schedule = fcfs(procs)
    assert schedule.gantt.times[0] == procs[0].arrival
    assert schedule.results[0].waiting == 0


def test_fcfs_averages():
    schedule = fcfs([Process(1, 0, 4), Process(2, 0, 2)])
    assert schedule.average_waiting() == 1.0
    assert schedule.average_turnaround() == (2 + 6) / 2


def test_average_of_empty_schedule_raises():
    with pytest.raises(ValueError):
        fcfs([]).average_waiting()


def test_sjf_picks_shortest_arrived_job():
    procs = [Process(1, 0, 5), Process(2, 1, 3), Process(3, 1, 1)]
    schedule = sjf(procs)
    assert schedule.gantt.pids == (1, 3, 2)
    assert [r.pid for r in schedule.results] == [1, 2, 3]


def test_srtf_preempts_long_job():
    first, second = Process(1, 0, 8), Process(2, 1, 4)
    schedule = srtf([first, second])
    assert schedule.gantt.pids == (1, 2, 1)
    assert schedule.gantt.times == (
        0,
        second.arrival,
        second.arrival + second.burst,
        first.burst + second.burst,
    )


def test_srtf_rejects_zero_burst():
    with pytest.raises(ValueError):
        srtf([Process(1, 0, 0)])


def test_priority_nonpreemptive_runs_lower_number_first():
    procs = [Process(1, 0, 2, 5), Process(2, 0, 2, 1), Process(3, 0, 2, 3)]
    schedule = priority_nonpreemptive(procs)
    assert schedule.gantt.pids == (2, 3, 1)


def test_priority_preemptive_high_priority_arrival_preempts():
    low, high = Process(1, 0, 6, 4), Process(2, 2, 2, 1)
    schedule = priority_preemptive([low, high])
    assert schedule.gantt.pids == (1, 2, 1)
    assert schedule.results[1].waiting == 0
    assert schedule.results[0].completion == low.burst + high.burst


def test_round_robin_slices():
    quantum = 2
    procs = [Process(1, 0, 3), Process(2, 0, 2)]
    schedule = round_robin(procs, quantum)
    assert schedule.gantt.pids == (1, 2, 1)
    assert schedule.gantt.times == (0, quantum, 2 * quantum, 3 + 2)


def test_round_robin_rejects_bad_quantum():
    with pytest.raises(ValueError):
        round_robin([Process(1, 0, 3)], 0)


def test_gantt_render():
    chart = GanttChart((1, 2), (0, 3, 5))
    assert chart.render().splitlines() == [
        " ------------",
        "| P1 | P2 |",
        " ------------",
        "0\t3\t5",
    ]


def test_gantt_rejects_mismatched_times():
    with pytest.raises(ValueError):
        GanttChart((1, 2), (0, 3))