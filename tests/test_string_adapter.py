import pytest

from accessgate.file_adapter import UnsupportedOperationError
from accessgate.persist import PolicyModel
from accessgate.string_adapter import StringAdapter

LINE = """
p, alice, data1, read
p, data_group_admin, data3, read
p, data_group_admin, data3, write
g, alice, data_group_admin
"""


def test_load_policy_from_text():
    model = PolicyModel()
    StringAdapter(LINE).load_policy(model)
    assert model.has_policy("p", "p", ["alice", "data1", "read"])
    assert model.has_policy("p", "p", ["data_group_admin", "data3", "write"])
    assert list(model.iter_policies("g")) == [("g", ["alice", "data_group_admin"])]


def test_duplicates_are_loaded_once():
    model = PolicyModel()
    StringAdapter("p, alice, data1, read\np, alice, data1, read").load_policy(model)
    assert list(model.iter_policies("p")) == [("p", ["alice", "data1", "read"])]


def test_malformed_lines_are_skipped():
    model = PolicyModel()
    StringAdapter('p, "alice\np, bob, data2, write').load_policy(model)
    assert list(model.iter_policies("p")) == [("p", ["bob", "data2", "write"])]


def test_empty_line_is_rejected():
    with pytest.raises(ValueError):
        StringAdapter("").load_policy(PolicyModel())


def test_save_round_trip():
    model = PolicyModel()
    StringAdapter(LINE).load_policy(model)
    target = StringAdapter("unused")
    target.save_policy(model)
    assert target.line == LINE.strip("\n")
    reloaded = PolicyModel()
    target.load_policy(reloaded)
    assert list(reloaded.iter_policies("p")) == list(model.iter_policies("p"))


def test_remove_policy_clears_text():
    adapter = StringAdapter(LINE)
    adapter.remove_policy("p", "p", ["alice", "data1", "read"])
    assert adapter.line == ""


def test_unsupported_operations():
    adapter = StringAdapter(LINE)
    with pytest.raises(UnsupportedOperationError):
        adapter.add_policy("p", "p", ["alice", "data1", "read"])
    with pytest.raises(UnsupportedOperationError):
        adapter.remove_filtered_policy("p", "p", 0, "alice")