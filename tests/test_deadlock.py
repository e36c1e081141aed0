import pytest

from ossim.deadlock import bankers_safety, detect_deadlock, need_matrix

ALLOCATION = [[0, 1, 0], [2, 0, 0], [3, 0, 2], [2, 1, 1], [0, 0, 2]]
MAXIMUM = [[7, 5, 3], [3, 2, 2], [9, 0, 2], [2, 2, 2], [4, 3, 3]]
AVAILABLE = [3, 3, 2]


def test_need_plus_allocation_is_maximum():
    need = need_matrix(ALLOCATION, MAXIMUM)
    for need_row, alloc_row, max_row in zip(need, ALLOCATION, MAXIMUM):
        assert [n + a for n, a in zip(need_row, alloc_row)] == max_row


def test_need_shape_mismatch():
    with pytest.raises(ValueError):
        need_matrix([[1, 2]], [[1, 2, 3]])


def test_bankers_textbook_sequence():
    result = bankers_safety(AVAILABLE, ALLOCATION, MAXIMUM)
    assert result.safe
    assert result.sequence == (1, 3, 4, 0, 2)


def test_bankers_final_work_returns_everything():
    result = bankers_safety(AVAILABLE, ALLOCATION, MAXIMUM)
    totals = [sum(col) for col in zip(*ALLOCATION)]
    assert list(result.work) == [a + t for a, t in zip(AVAILABLE, totals)]
    assert sorted(result.sequence) == list(range(len(ALLOCATION)))


def test_bankers_unsafe():
    result = bankers_safety([0], [[1], [1]], [[3], [3]])
    assert not result.safe
    assert result.sequence == ()


DET_ALLOC = [[0, 1, 0], [2, 0, 0], [3, 0, 3], [2, 1, 1], [0, 0, 2]]
DET_REQ = [[0, 0, 0], [2, 0, 2], [0, 0, 0], [1, 0, 0], [0, 0, 2]]


def test_detect_no_deadlock():
    result = detect_deadlock([0, 0, 0], DET_ALLOC, DET_REQ)
    assert not result.deadlock
    assert sorted(result.finish_order) == list(range(5))
    assert list(result.work) == [sum(col) for col in zip(*DET_ALLOC)]


def test_detect_deadlock():
    requests = [row[:] for row in DET_REQ]
    requests[2] = [0, 0, 1]
    result = detect_deadlock([0, 0, 0], DET_ALLOC, requests)
    assert result.deadlock
    assert result.finish_order == (0,)
    assert result.deadlocked == (1, 2, 3, 4)


def test_detect_rejects_too_many_processes():
    with pytest.raises(ValueError):
        detect_deadlock([1], [[0]] * 11, [[0]] * 11)


def test_detect_rejects_bad_shape():
    with pytest.raises(ValueError):
        detect_deadlock([1, 1], [[0, 0]], [[0]])