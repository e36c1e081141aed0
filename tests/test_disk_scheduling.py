import pytest

from ossim.disk_scheduling import Direction, SeekResult, SeekStep, cscan, scan, sstf

REQUESTS = [98, 183, 37, 122, 14, 124, 65, 67]
HEAD = 53


def test_sstf_total_for_classic_queue():
    assert sstf(REQUESTS, HEAD).total == 236


def test_sstf_visits_every_request_once():
    result = sstf(REQUESTS, HEAD)
    assert sorted(result.order) == sorted(REQUESTS)
    assert result.request_count == len(REQUESTS)


def test_sstf_steps_chain_from_head():
    steps = sstf(REQUESTS, HEAD).steps
    assert steps[0].start == HEAD
    for before, after in zip(steps, steps[1:]):
        assert before.end == after.start
    assert all(s.distance == abs(s.end - s.start) for s in steps)


def test_sstf_picks_nearest_first():
    result = sstf([10, 52, 90], 50)
    assert result.order[0] == 52


def test_sstf_tie_goes_to_earlier_request():
    assert sstf([60, 40], 50).order[0] == 60
    assert sstf([40, 60], 50).order[0] == 40


def test_sstf_average_is_total_over_requests():
    result = sstf(REQUESTS, HEAD)
    assert result.average() == pytest.approx(result.total / len(REQUESTS))


def test_average_of_no_requests_raises():
    with pytest.raises(ValueError):
        sstf([], HEAD).average()


def test_cscan_total_for_classic_queue():
    assert cscan(REQUESTS, HEAD, 200).total == 382


def test_cscan_reaches_disk_end_then_wraps_to_zero():
    result = cscan(REQUESTS, HEAD, 200)
    order = result.order
    top = order.index(199)
    assert order[top + 1] == 0
    assert all(t >= HEAD for t in order[:top + 1])
    assert all(t < HEAD for t in order[top + 1:])


def test_cscan_step_count_and_coverage():
    result = cscan(REQUESTS, HEAD, 200)
    assert len(result.steps) == len(REQUESTS) + 4
    assert set(REQUESTS) <= set(result.order)
    assert result.request_count == len(REQUESTS)


def test_cscan_distances_match_moves():
    result = cscan(REQUESTS, HEAD, 200)
    assert result.steps[0].start == HEAD
    assert all(s.distance == abs(s.end - s.start) for s in result.steps)


def test_scan_clockwise_total():
    assert scan(REQUESTS, HEAD, Direction.CLOCKWISE).total == 169


def test_scan_clockwise_order_goes_up_then_down():
    order = scan(REQUESTS, HEAD, "C").order
    assert order[0] == HEAD
    peak = order.index(max(REQUESTS))
    assert list(order[: peak + 1]) == sorted(order[: peak + 1])
    assert list(order[peak + 1:]) == sorted(order[peak + 1:], reverse=True)
    assert sorted(order[1:]) == sorted(REQUESTS)


def test_scan_anticlockwise_order_goes_down_then_up():
    order = scan(REQUESTS, HEAD, Direction.ANTICLOCKWISE).order
    low = order.index(min(REQUESTS))
    assert list(order[: low + 1]) == sorted(order[: low + 1], reverse=True)
    assert list(order[low + 1:]) == sorted(order[low + 1:])


def test_scan_first_step_is_stationary():
    first = scan(REQUESTS, HEAD, "A").steps[0]
    assert first == SeekStep(HEAD, HEAD, 0)


def test_scan_lowercase_direction_accepted():
    assert scan(REQUESTS, HEAD, "c") == scan(REQUESTS, HEAD, Direction.CLOCKWISE)
    assert scan(REQUESTS, HEAD, "a") == scan(REQUESTS, HEAD, Direction.ANTICLOCKWISE)


def test_scan_invalid_direction_raises():
    with pytest.raises(ValueError, match="Invalid direction"):
        scan(REQUESTS, HEAD, "X")


def test_scan_total_sums_step_distances():
    result = scan(REQUESTS, HEAD, "A")
    assert isinstance(result, SeekResult)
    assert result.total == sum(s.distance for s in result.steps)