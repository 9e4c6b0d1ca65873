"""
Tests for ObservableValue and ObservableList.
"""

from unittest.mock import Mock

from dazzlebind import ObservableList, ObservableValue, is_notifying_collection, is_push_source


class TestObservableValue:
    """Test the stock push source."""

    def test_satisfies_push_source_contract(self):
        assert is_push_source(ObservableValue(1))
        assert not is_push_source(object())
        assert not is_push_source(Mock(spec=["value"]))

    def test_fires_on_change(self):
        source = ObservableValue(1)
        handler = Mock()
        source.value_changed.subscribe(handler)

        source.value = 2

        handler.assert_called_once_with()
        assert source.value == 2

    def test_equal_value_does_not_fire(self):
        source = ObservableValue("a")
        handler = Mock()
        source.value_changed.subscribe(handler)

        source.value = "a"

        handler.assert_not_called()

    def test_notify_fires_without_change(self):
        """notify() reports in-place mutation of the held object."""
        source = ObservableValue([1])
        handler = Mock()
        source.value_changed.subscribe(handler)

        source.value.append(2)
        source.notify()

        handler.assert_called_once_with()


class TestObservableList:
    """Test collection notifications."""

    def _observed(self, *items):
        items_list = ObservableList(items)
        added, removed, cleared = Mock(), Mock(), Mock()
        items_list.item_added.subscribe(added)
        items_list.item_removed.subscribe(removed)
        items_list.cleared.subscribe(cleared)
        return items_list, added, removed, cleared

    def test_satisfies_collection_contract(self):
        assert is_notifying_collection(ObservableList())
        assert not is_notifying_collection([])

    def test_is_a_list(self):
        items = ObservableList([1, 2])
        assert isinstance(items, list)
        assert items == [1, 2]

    def test_append_and_insert(self):
        items, added, removed, cleared = self._observed()

        items.append("a")
        items.insert(0, "b")

        assert items == ["b", "a"]
        assert [c.args for c in added.call_args_list] == [("a",), ("b",)]
        removed.assert_not_called()

    def test_extend_reports_each_item(self):
        items, added, _, _ = self._observed()
        items.extend(["a", "b"])
        items += ["c"]
        assert added.call_count == 3
        assert items == ["a", "b", "c"]

    def test_remove_and_pop(self):
        items, _, removed, _ = self._observed("a", "b", "c")

        items.remove("b")
        popped = items.pop()

        assert popped == "c"
        assert [c.args for c in removed.call_args_list] == [("b",), ("c",)]

    def test_clear(self):
        items, _, removed, cleared = self._observed("a", "b")
        items.clear()
        assert items == []
        cleared.assert_called_once_with()
        removed.assert_not_called()

    def test_setitem_reports_replacement(self):
        items, added, removed, _ = self._observed("a", "b")
        items[1] = "z"
        assert items == ["a", "z"]
        removed.assert_called_once_with("b")
        added.assert_called_once_with("z")

    def test_slice_assignment(self):
        items, added, removed, _ = self._observed("a", "b", "c")
        items[0:2] = ["x"]
        assert items == ["x", "c"]
        assert removed.call_count == 2
        added.assert_called_once_with("x")

    def test_delitem(self):
        items, _, removed, _ = self._observed("a", "b", "c")
        del items[0]
        del items[0:2]
        assert items == []
        assert removed.call_count == 3
