"""Aggregations and grouping"""
import pytest
from py_collection import PyCollection, collect
from py_collection.errors import EmptyCollectionError, PyCollectionTypeError


@pytest.fixture
def values():
    return collect([{'v': 1}, {'v': 2}, {'v': 3}])


class TestAggregates:

    def test_sum(self, values):
        assert values.sum('v') == 6

    def test_avg(self, values):
        assert values.avg('v') == 2

    def test_min_max(self, values):
        assert values.min('v') == 1
        assert values.max('v') == 3

    def test_scalars_without_field(self):
        c = collect([4, 1.5, 2])
        assert c.sum() == 7.5
        assert c.avg() == 2.5
        assert c.min() == 1.5
        assert c.max() == 4

    def test_skips_none_and_missing(self):
        c = collect([{'v': 10}, {'v': None}, {'w': 1}, 'x', {'v': 20}])
        assert c.sum('v') == 30
        assert c.avg('v') == 15
        assert c.min('v') == 10
        assert c.max('v') == 20

    def test_key_path(self):
        c = collect([{'a': {'n': 2}}, {'a': {'n': 5}}])
        assert c.sum('a.n') == 7
        assert c.max('a.n') == 5

    def test_count(self, values):
        assert values.count() == 3
        assert collect().count() == 0

    def test_sum_non_numeric(self):
        with pytest.raises(PyCollectionTypeError):
            collect([{'v': 1}, {'v': 'a'}]).sum('v')

    def test_sum_empty_is_zero(self):
        assert collect().sum('v') == 0


class TestEmptyAggregates:
    """avg/min/max share one policy: raise EmptyCollectionError"""

    @pytest.mark.parametrize("method", ['avg', 'min', 'max'])
    def test_empty_collection_raises(self, method):
        with pytest.raises(EmptyCollectionError):
            getattr(collect(), method)('v')

    @pytest.mark.parametrize("method", ['avg', 'min', 'max'])
    def test_no_present_values_raises(self, method):
        with pytest.raises(EmptyCollectionError):
            getattr(collect([{'v': None}, {'w': 1}]), method)('v')

    def test_empty_collection_error_is_value_error(self):
        with pytest.raises(ValueError):
            collect().avg()


class TestGroupBy:

    def test_group_by(self):
        c = collect([{'t': 'a', 'v': 1}, {'t': 'b', 'v': 2}, {'t': 'a', 'v': 3}])
        groups = c.group_by('t')
        assert list(groups) == ['a', 'b']
        assert groups['a'].all() == [{'t': 'a', 'v': 1}, {'t': 'a', 'v': 3}]
        assert groups['b'].all() == [{'t': 'b', 'v': 2}]
        assert all(isinstance(g, PyCollection) for g in groups.values())

    def test_group_by_order_of_first_occurrence(self):
        c = collect([{'t': 'z'}, {'t': 'a'}, {'t': 'm'}, {'t': 'a'}])
        assert list(c.group_by('t')) == ['z', 'a', 'm']

    def test_group_keys_are_strings(self):
        c = collect([{'n': 1}, {'n': '1'}, {'n': 2}])
        groups = c.group_by('n')
        assert list(groups) == ['1', '2']
        assert groups['1'].count() == 2

    def test_group_by_missing_key(self):
        c = collect([{'t': 'a'}, {'u': 1}, {'t': None}])
        groups = c.group_by('t')
        assert list(groups) == ['a', 'None']
        assert groups['None'].count() == 2

    def test_group_by_callable(self):
        groups = collect([1, 2, 3, 4, 5]).group_by(lambda x: 'odd' if x % 2 else 'even')
        assert groups['odd'].all() == [1, 3, 5]
        assert groups['even'].all() == [2, 4]

    def test_group_by_leaves_source(self):
        c = collect([{'t': 'a'}])
        c.group_by('t')['a'].push({'t': 'a'})
        assert c.count() == 1

    def test_group_by_empty(self):
        assert collect().group_by('t') == {}
