import pytest

from ledbasic.errors import BasicRuntimeError
from ledbasic.values import BasicArray


def test_new_array_is_zero_filled():
    array = BasicArray(5)
    assert len(array) == 5
    assert list(array) == [0, 0, 0, 0, 0]


def test_one_based_store_and_load():
    array = BasicArray(3)
    array[1] = 10
    array[3] = 30
    assert list(array) == [10, 0, 30]
    assert array[1] == 10
    assert array[3] == 30


@pytest.mark.parametrize("index", [0, -1, 4, 100])
def test_out_of_bounds_read(index):
    array = BasicArray(3)
    array[2] = 5
    with pytest.raises(BasicRuntimeError) as info:
        _ = array[index]
    assert info.value.message == "BOUNDS"
    assert list(array) == [0, 5, 0]
    assert array[2] == 5


@pytest.mark.parametrize("index", [0, 4])
def test_out_of_bounds_write(index):
    array = BasicArray(3)
    with pytest.raises(BasicRuntimeError, match="BOUNDS"):
        array[index] = 1
    assert list(array) == [0, 0, 0]


def test_empty_array_rejects_every_index():
    array = BasicArray(0)
    assert len(array) == 0
    with pytest.raises(BasicRuntimeError):
        array[1]


def test_negative_size_rejected():
    with pytest.raises(BasicRuntimeError):
        BasicArray(-1)


def test_resize_shrinks_keeping_prefix():
    array = BasicArray(4)
    for position, value in enumerate([5, 6, 7, 8], start=1):
        array[position] = value
    array.resize(2)
    assert list(array) == [5, 6]
    with pytest.raises(BasicRuntimeError):
        array[3]


def test_resize_grows_with_zeros():
    array = BasicArray(1)
    array[1] = 9
    array.resize(3)
    assert list(array) == [9, 0, 0]


def test_iteration_is_a_snapshot():
    array = BasicArray(2)
    snapshot = iter(array)
    array[1] = 4
    assert list(snapshot) == [0, 0]
    assert list(array) == [4, 0]