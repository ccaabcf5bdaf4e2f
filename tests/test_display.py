"""repr output"""
from py_collection import collect
from py_collection import display


def test_repr_small():
    assert repr(collect([1, 'a', None])) == "PyCollection([1, 'a', None])"


def test_repr_empty():
    assert repr(collect()) == "PyCollection([])"


def test_repr_floats():
    assert repr(collect([1.0, 2.5])) == "PyCollection([1.0, 2.5])"


def test_repr_records():
    assert repr(collect([{'id': 1}])) == "PyCollection([{'id': 1}])"


def test_repr_truncates():
    c = collect(range(display.MAX_HEAD_ROWS * 2 + 5))
    text = repr(c)
    assert '...' in text
    assert text.startswith("PyCollection([0, 1, 2, 3, 4, ...")
    assert text.endswith(f"count={len(c)})")


def test_repr_nested_collections():
    assert repr(collect([1, 2, 3]).chunk(2)) == "PyCollection([PyCollection([1, 2]), PyCollection([3])])"


def test_repr_long_item_is_elided():
    text = repr(collect(['x' * 200]))
    assert len(text) < 200
    assert text.endswith("...])")


def test_repr_self_referencing_record():
    record = {}
    record['self'] = record
    assert repr(collect([record])) == "PyCollection([{'self': {...}}])"


def test_repr_collection_containing_itself():
    c = collect([1])
    c.push(c)
    assert repr(c) == "PyCollection([1, PyCollection([...])])"


def test_repr_cycle_through_plain_list():
    c = collect([1])
    c.push([c])
    assert repr(c) == "PyCollection([1, [PyCollection([...])]])"


def test_repr_repeated_record_is_not_a_cycle():
    record = {'a': 1}
    assert repr(collect([record, record])) == "PyCollection([{'a': 1}, {'a': 1}])"
