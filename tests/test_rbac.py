import pytest

from accessgate.rbac import ConditionalRoleManagerBase, RoleManagerBase
from accessgate.role_manager import RoleManager, RoleManagerImpl


def test_role_manager_base_is_abstract():
    with pytest.raises(TypeError):
        RoleManagerBase()


def test_conditional_base_is_abstract():
    with pytest.raises(TypeError):
        ConditionalRoleManagerBase()


class _Partial(RoleManagerBase):
    def clear(self):
        return None


def test_incomplete_subclass_cannot_be_created():
    with pytest.raises(TypeError):
        _Partial()

    complete: RoleManagerBase = RoleManagerImpl(3)
    complete.add_link("a", "b")
    assert complete.has_link("a", "b") is True


def test_default_manager_used_through_interface():
    rm: RoleManagerBase = RoleManager(3)
    rm.add_link("alice", "admin")
    assert rm.has_link("alice", "admin") is True
    assert rm.get_roles("alice") == ["admin"]
    assert rm.get_users("admin") == ["alice"]


def test_build_relationship_does_not_link():
    rm: RoleManagerBase = RoleManagerImpl(3)
    assert rm.build_relationship("a", "b") is None
    assert rm.has_link("a", "b") is False


def test_match_through_interface():
    rm: RoleManagerBase = RoleManagerImpl(3)
    assert rm.match("same", "same") is True
    assert rm.match("one", "other") is False