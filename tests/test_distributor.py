from dataclasses import dataclass

import pytest

from app.services.distributor import distribute, slice_sizes
from app.services.list_errors import NoAgentsError
from app.services.record_filter import ValidRecord


@dataclass(frozen=True)
class _Agent:
    id: str


def _records(n: int) -> list[ValidRecord]:
    return [ValidRecord(first_name=f"N{i}", phone=str(i)) for i in range(n)]


def _agents(k: int) -> list[_Agent]:
    return [_Agent(id=f"agt_{i}") for i in range(k)]


def test_remainder_goes_to_earliest_agents():
    result = distribute(_records(7), _agents(3))
    assert [d.item_count for d in result] == [3, 2, 2]
    assert [d.agent_id for d in result] == ["agt_0", "agt_1", "agt_2"]


@pytest.mark.parametrize("n", [0, 1, 4, 5, 6, 13, 100])
@pytest.mark.parametrize("k", [1, 2, 3, 5])
def test_partition_is_complete_and_ordered(n, k):
    records = _records(n)
    result = distribute(records, _agents(k))

    assert len(result) == k
    assert sum(d.item_count for d in result) == n
    assert [r for d in result for r in d.items] == records
    for d in result:
        assert d.item_count == len(d.items)

    counts = [d.item_count for d in result]
    assert max(counts) - min(counts) <= 1
    assert counts == sorted(counts, reverse=True)


def test_zero_records_gives_empty_slice_per_agent():
    result = distribute([], _agents(3))
    assert [(d.agent_id, d.item_count, d.items) for d in result] == [
        ("agt_0", 0, ()),
        ("agt_1", 0, ()),
        ("agt_2", 0, ()),
    ]


def test_more_agents_than_records():
    assert [d.item_count for d in distribute(_records(2), _agents(5))] == [1, 1, 0, 0, 0]


def test_no_agents_fails():
    with pytest.raises(NoAgentsError):
        distribute(_records(4), [])


def test_slice_sizes():
    assert slice_sizes(10, 4) == [3, 3, 2, 2]
    assert slice_sizes(0, 2) == [0, 0]
    with pytest.raises(NoAgentsError):
        slice_sizes(3, 0)
