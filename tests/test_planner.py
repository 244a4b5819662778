"""Tests for chunk planning."""

import pytest

from split_get.errors import InvalidPlanError
from split_get.planner import default_chunk_size, num_tasks, plan


def ranges(chunks):
    return [(c.start, c.end) for c in chunks]


def test_single_chunk_when_resource_fits():
    chunks = plan(500, 1000, 4)
    assert ranges(chunks) == [(0, 499)]
    assert chunks[0].index == 0


def test_last_chunk_absorbs_remainder():
    assert ranges(plan(1000, 300, 4)) == [(0, 299), (300, 599), (600, 899), (900, 999)]


def test_exact_multiple():
    assert ranges(plan(900, 300, 2)) == [(0, 299), (300, 599), (600, 899)]


def test_worker_count_does_not_change_chunk_count():
    assert len(plan(1000, 100, 1)) == len(plan(1000, 100, 64)) == 10


@pytest.mark.parametrize("total_size", [1, 2, 7, 299, 300, 301, 1000, 4097, 65536])
@pytest.mark.parametrize("max_chunk_size", [1, 3, 100, 300, 1024, 100000])
def test_plan_covers_resource_exactly(total_size, max_chunk_size):
    chunks = plan(total_size, max_chunk_size, 4)

    assert [c.index for c in chunks] == list(range(len(chunks)))
    assert chunks[0].start == 0
    assert chunks[-1].end == total_size - 1
    for previous, current in zip(chunks, chunks[1:]):
        assert previous.end == current.start - 1
    assert all(0 < c.length <= max_chunk_size for c in chunks)
    assert sum(c.length for c in chunks) == total_size
    assert len(chunks) == num_tasks(total_size, max_chunk_size)


def test_chunk_range_string():
    chunk = plan(1000, 300, 4)[1]
    assert chunk.range == "300-599"
    assert chunk.length == 300


@pytest.mark.parametrize("args", [(0, 100, 4), (-5, 100, 4), (100, 0, 4), (100, -1, 4), (100, 10, 0)])
def test_invalid_inputs(args):
    with pytest.raises(InvalidPlanError):
        plan(*args)


def test_default_chunk_size_gives_one_chunk_per_worker():
    assert default_chunk_size(1000, 4) == 250
    assert default_chunk_size(1001, 4) == 251
    assert len(plan(1001, default_chunk_size(1001, 4), 4)) == 4
    assert default_chunk_size(3, 8) == 1


def test_num_tasks():
    assert num_tasks(1000, 300) == 4
    assert num_tasks(1, 300) == 1
    with pytest.raises(InvalidPlanError):
        num_tasks(0, 300)
