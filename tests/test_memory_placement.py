import pytest

from ossim.memory_placement import Allocation, MemoryState

BLOCKS = [100, 500, 200, 300, 600]
PROCS = [212, 417, 112, 426]


def _strategies():
    return ["first_fit", "next_fit", "best_fit", "worst_fit"]


@pytest.mark.parametrize("name", _strategies())
def test_space_is_conserved(name):
    state = MemoryState(BLOCKS, PROCS)
    allocs = getattr(state, name)()
    placed = sum(a.size for a in allocs if a.allocated)
    assert sum(state.blocks) + placed == sum(BLOCKS)
    assert all(free >= 0 for free in state.blocks)


@pytest.mark.parametrize("name", _strategies())
def test_allocated_list_matches_results(name):
    state = MemoryState(BLOCKS, PROCS)
    allocs = getattr(state, name)()
    assert [a.size if a.allocated else 0 for a in allocs] == state.allocated
    for a in allocs:
        if a.allocated:
            assert state.blocks[a.block] <= a.remaining


def test_first_fit_skips_blocks_too_small():
    state = MemoryState([10, 50, 50], [30])
    (alloc,) = state.first_fit()
    assert alloc.block == 1
    assert state.blocks[0] == 10


def test_first_fit_cannot_place_largest():
    allocs = MemoryState(BLOCKS, PROCS).first_fit()
    assert allocs[-1].block is None
    assert allocs[-1].remaining is None


def test_best_fit_places_all_textbook_processes():
    allocs = MemoryState(BLOCKS, PROCS).best_fit()
    assert all(a.allocated for a in allocs)


def test_best_fit_prefers_tightest_block():
    state = MemoryState([50, 30, 40], [25])
    (alloc,) = state.best_fit()
    assert state.block_sizes[alloc.block] == min(b for b in state.block_sizes if b >= 25)


def test_best_fit_ignores_huge_leftover():
    (alloc,) = MemoryState([20000], [5]).best_fit()
    assert not alloc.allocated


def test_worst_fit_prefers_largest_block_and_first_on_tie():
    state = MemoryState([40, 70, 70], [10])
    (alloc,) = state.worst_fit()
    assert alloc.block == 1


def test_next_fit_remembers_last_block_across_reset():
    state = MemoryState([20, 20], [15, 15])
    first = state.next_fit()
    assert [a.block for a in first] == [0, 1]
    state.reset()
    again = state.next_fit()
    assert again[0].block == 1
    fresh = MemoryState([20, 20], [15, 15]).first_fit()
    assert fresh[0].block == 0


def test_reset_restores_state():
    state = MemoryState(BLOCKS, PROCS)
    state.worst_fit()
    state.reset()
    assert state.blocks == BLOCKS
    assert state.allocated == [0] * len(PROCS)


def test_allocation_text():
    failed = Allocation(0, 426, None, None)
    assert str(failed) == "Process P1 could not be allocated."
    placed = Allocation(1, 212, 3, 88)
    assert str(placed) == (
        "Process P2 (Size: 212KB) allocated to Block B4 (Remaining Block Size: 88KB)"
    )


def test_state_text_lists_processes():
    state = MemoryState([100], [50, 500])
    state.first_fit()
    text = str(state)
    assert "Process P1 (Size: 50KB) allocated 50KB" in text
    assert "Process P2 (Size: 500KB) not allocated" in text
    assert "Block B1 (Original Size: 100KB, Remaining: 50KB)" in text