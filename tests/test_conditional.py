import pytest

from accessgate.conditional import ConditionalDomainManager, ConditionalRoleManager


def is_open(*params):
    return bool(params) and params[0] == "open"


def failing(*params):
    raise RuntimeError("condition failed")


@pytest.fixture
def crm():
    rm = ConditionalRoleManager(10)
    rm.add_link("alice", "admin")
    return rm


def test_link_without_condition_holds(crm):
    assert crm.has_link("alice", "admin") is True
    assert crm.has_link("admin", "alice") is False


def test_condition_controls_link(crm):
    crm.add_link_condition_func("alice", "admin", is_open)
    crm.set_link_condition_func_params("alice", "admin", "open")
    assert crm.has_link("alice", "admin") is True
    crm.set_link_condition_func_params("alice", "admin", "closed")
    assert crm.has_link("alice", "admin") is False


def test_condition_without_params_is_called_with_none(crm):
    calls = []

    def record(*params):
        calls.append(params)
        return True

    crm.add_link_condition_func("alice", "admin", record)
    assert crm.has_link("alice", "admin") is True
    assert calls == [()]


def test_failing_condition_breaks_link(crm):
    crm.add_link_condition_func("alice", "admin", failing)
    assert crm.has_link("alice", "admin") is False


def test_condition_on_indirect_link(crm):
    crm.add_link("admin", "root")
    crm.add_link_condition_func("admin", "root", is_open)
    crm.set_link_condition_func_params("admin", "root", "closed")
    assert crm.has_link("alice", "admin") is True
    assert crm.has_link("alice", "root") is False
    crm.set_link_condition_func_params("admin", "root", "open")
    assert crm.has_link("alice", "root") is True


def test_get_condition_func_and_params(crm):
    crm.add_link_condition_func("alice", "admin", is_open)
    crm.set_link_condition_func_params("alice", "admin", "open", "x")
    assert crm.get_link_condition_func("alice", "admin") is is_open
    assert crm.get_link_condition_func_params("alice", "admin") == ["open", "x"]


def test_get_condition_for_unknown_names_leaves_no_roles(crm):
    assert crm.get_link_condition_func("ghost", "admin") is None
    assert crm.get_link_condition_func_params("alice", "ghost") is None
    assert crm.get_roles("alice") == ["admin"]
    assert crm.get_users("admin") == ["alice"]
    assert sorted(name for name, _, _ in crm.links()) == ["alice"]


def test_domain_condition(crm):
    crm.add_domain_link_condition_func("alice", "admin", "d1", is_open)
    crm.set_domain_link_condition_func_params("alice", "admin", "d1", "closed")
    assert crm.get_domain_link_condition_func("alice", "admin", "d1") is is_open
    assert crm.get_link_condition_func("alice", "admin") is None
    assert crm.get_link_condition_func_params("alice", "admin", "d1") == ["closed"]
    assert crm.has_link("alice", "admin", "d1") is False
    assert crm.has_link("alice", "admin") is True


def test_domain_manager_conditions():
    dm = ConditionalDomainManager(10)
    dm.add_link("alice", "admin", "domain1")
    dm.add_link("bob", "admin", "domain2")
    dm.add_domain_link_condition_func("alice", "admin", "domain1", is_open)
    dm.set_domain_link_condition_func_params("alice", "admin", "domain1", "open")
    assert dm.has_link("alice", "admin", "domain1") is True
    assert dm.has_link("alice", "admin", "domain2") is False
    assert dm.has_link("bob", "admin", "domain2") is True
    dm.set_domain_link_condition_func_params("alice", "admin", "domain1", "closed")
    assert dm.has_link("alice", "admin", "domain1") is False


def test_domain_manager_delete_link_and_roles():
    dm = ConditionalDomainManager(10)
    dm.add_link("alice", "admin", "domain1")
    assert dm.get_roles("alice", "domain1") == ["admin"]
    assert dm.get_all_domains() == ["domain1"]
    dm.delete_link("alice", "admin", "domain1")
    assert dm.get_roles("alice", "domain1") == []
    assert dm.has_link("alice", "admin", "domain1") is False


def test_domain_manager_default_domain_condition():
    dm = ConditionalDomainManager(10)
    dm.add_link("alice", "admin")
    dm.add_link_condition_func("alice", "admin", failing)
    assert dm.has_link("alice", "admin") is False


def test_domain_manager_condition_only_reaches_existing_domains():
    dm = ConditionalDomainManager(10)
    dm.add_domain_link_condition_func("alice", "admin", "domain1", failing)
    dm.add_link("alice", "admin", "domain1")
    assert dm.has_link("alice", "admin", "domain1") is True