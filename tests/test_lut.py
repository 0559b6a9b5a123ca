import pytest

from ledbasic.errors import BasicRuntimeError
from ledbasic.lut import LookupTable


def write(tmp_path, index, text):
    (tmp_path / f"LUT_{index}.csv").write_text(text)


def test_check_counts_entries(tmp_path):
    write(tmp_path, 1, "10,20,30")
    table = LookupTable(tmp_path)
    assert table.check(1) == 3


def test_check_missing_and_empty(tmp_path):
    write(tmp_path, 2, "42")
    table = LookupTable(tmp_path)
    assert table.check(9) is None
    assert table.check(2) == 0


def test_load_reads_values(tmp_path):
    write(tmp_path, 1, "10, 20,-5\n")
    table = LookupTable(tmp_path)
    assert table.load(1) == 3
    assert table.values() == [10, 20, -5]
    assert table.value(2) == -5
    assert table.index == 1


def test_load_trailing_comma_drops_empty_entry(tmp_path):
    write(tmp_path, 3, "7,8,")
    table = LookupTable(tmp_path)
    assert table.load(3) == 2
    assert table.values() == [7, 8]


def test_load_missing_file_raises(tmp_path):
    table = LookupTable(tmp_path)
    with pytest.raises(BasicRuntimeError, match="LOADLUT: FAILED TO LOAD LUT"):
        table.load(5)


def test_load_negative_index_raises(tmp_path):
    with pytest.raises(BasicRuntimeError, match="LOADLUT: NEGATIVE INDEX"):
        LookupTable(tmp_path).load(-1)


def test_save_and_load_round_trip(tmp_path):
    table = LookupTable(tmp_path)
    table.from_values([3, 1, 4, 1, 5])
    assert table.save(4) == 1
    other = LookupTable(tmp_path)
    assert other.load(4) == 5
    assert other.values() == [3, 1, 4, 1, 5]


def test_save_without_table_raises(tmp_path):
    with pytest.raises(BasicRuntimeError, match="SAVELUT: FAILED TO SAVE LUT"):
        LookupTable(tmp_path).save(1)


def test_from_values_leaves_no_loaded_index(tmp_path):
    table = LookupTable(tmp_path)
    assert table.from_values([1, 2]) == 2
    with pytest.raises(BasicRuntimeError, match="LUT: NO LUT LOADED"):
        table.value(0)


def test_value_bounds(tmp_path):
    write(tmp_path, 1, "1,2")
    table = LookupTable(tmp_path)
    table.load(1)
    with pytest.raises(BasicRuntimeError, match="LUT: INDEX OUT OF BOUNDS"):
        table.value(2)
    with pytest.raises(BasicRuntimeError, match="LUT: NEGATIVE INDEX"):
        table.value(-1)


def test_size_prefers_loaded_table(tmp_path):
    write(tmp_path, 1, "1,2,3")
    table = LookupTable(tmp_path)
    table.load(1)
    (tmp_path / "LUT_1.csv").write_text("1,2")
    assert table.size(1) == 3
    assert LookupTable(tmp_path).size(1) == 2


def test_size_missing_raises(tmp_path):
    with pytest.raises(BasicRuntimeError, match="LUTSIZE: LUT DOES NOT EXISTS"):
        LookupTable(tmp_path).size(7)


def test_load_same_index_uses_cached_table(tmp_path):
    write(tmp_path, 1, "5,6")
    table = LookupTable(tmp_path)
    table.load(1)
    (tmp_path / "LUT_1.csv").unlink()
    assert table.load(1) == 2
    assert table.values() == [5, 6]


def test_values_without_table_raises(tmp_path):
    with pytest.raises(BasicRuntimeError):
        LookupTable(tmp_path).values()