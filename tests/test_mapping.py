import pytest

from sorkinbot.mapping import int_map_with_offset, sorted_int_map


def test_sorted_int_map_orders_keys():
    result = sorted_int_map({3: "c", 1: "a", 2: "b"})
    assert list(result.items()) == [(1, "a"), (2, "b"), (3, "c")]


def test_sorted_int_map_empty():
    assert sorted_int_map({}) == {}


def test_offset_zero_keeps_everything_sorted():
    data = {10: "x", 5: "y", 7: "z"}
    result = int_map_with_offset(data, 0)
    assert result == data
    assert list(result) == sorted(data)


def test_offset_skips_smallest_keys():
    result = int_map_with_offset({10: "x", 5: "y", 7: "z"}, 1)
    assert list(result.items()) == [(7, "z"), (10, "x")]


@pytest.mark.parametrize("offset", [3, 4, 100])
def test_offset_past_end_is_empty(offset):
    assert int_map_with_offset({1: "a", 2: "b", 3: "c"}, offset) == {}


def test_negative_offset_raises():
    with pytest.raises(ValueError):
        int_map_with_offset({1: "a"}, -1)