"""Role managers whose links may be guarded by condition functions."""

from __future__ import annotations

from collections.abc import Sequence

from accessgate.rbac import ConditionalRoleManagerBase, LinkConditionFunc, MatchingFunc
from accessgate.role_manager import DEFAULT_DOMAIN, DomainManager, Role, RoleManagerImpl


class ConditionalRoleManager(RoleManagerImpl, ConditionalRoleManagerBase):
    """Single-domain role manager where a link holds only while its condition passes."""

    def __init__(
        self, max_hierarchy_level: int = 10, matching_func: MatchingFunc | None = None
    ) -> None:
        super().__init__(max_hierarchy_level, matching_func)

    def has_link(self, name1: str, name2: str, *args: str) -> bool:
        """Return whether ``name1`` reaches ``name2`` through links whose conditions pass."""
        return super().has_link(name1, name2, *args)

    def _collect_next_roles(
        self, role: Role, domains: Sequence[str], next_roles: dict[str, Role]
    ) -> None:
        for _, next_role in role._iter_roles():
            try:
                passed = self._link_passes(role, next_role, domains)
            except Exception as exc:  # a failing condition invalidates the traversal
                self._logger.error("hasLinkHelper LinkCondition Error: %s", exc)
                return
            if passed:
                next_roles[next_role.name] = next_role

    def _link_passes(self, current: Role, following: Role, domains: Sequence[str]) -> bool:
        if domains:
            domain = domains[0]
            fn = self.get_domain_link_condition_func(current.name, following.name, domain)
            if fn is None:
                return True
            params = self.get_link_condition_func_params(current.name, following.name, domain)
        else:
            fn = self.get_link_condition_func(current.name, following.name)
            if fn is None:
                return True
            params = self.get_link_condition_func_params(current.name, following.name)
        return bool(fn(*(params or [])))

    def get_link_condition_func(self, user_name: str, role_name: str) -> LinkConditionFunc | None:
        """Return the condition of the link in the default domain, or None."""
        return self.get_domain_link_condition_func(user_name, role_name, DEFAULT_DOMAIN)

    def get_domain_link_condition_func(
        self, user_name: str, role_name: str, domain: str
    ) -> LinkConditionFunc | None:
        """Return the condition of the link within ``domain``, or None."""
        user, user_created = self._get_role(user_name)
        role, role_created = self._get_role(role_name)
        if user_created or role_created:
            if user_created:
                self._remove_role(user.name)
            if role_created:
                self._remove_role(role.name)
            return None
        return user._link_condition_func(role, domain)

    def get_link_condition_func_params(
        self, user_name: str, role_name: str, *args: str
    ) -> list[str] | None:
        """Return the condition parameters of the link; ``args`` may hold a domain."""
        user, user_created = self._get_role(user_name)
        role, role_created = self._get_role(role_name)
        if user_created or role_created:
            if user_created:
                self._remove_role(user.name)
            if role_created:
                self._remove_role(role.name)
            return None
        domain = args[0] if args else DEFAULT_DOMAIN
        return user._link_condition_params(role, domain)

    def add_link_condition_func(self, user_name: str, role_name: str, fn: LinkConditionFunc) -> None:
        self.add_domain_link_condition_func(user_name, role_name, DEFAULT_DOMAIN, fn)

    def add_domain_link_condition_func(
        self, user_name: str, role_name: str, domain: str, fn: LinkConditionFunc
    ) -> None:
        user, _ = self._get_role(user_name)
        role, _ = self._get_role(role_name)
        user._set_link_condition_func(role, domain, fn)

    def set_link_condition_func_params(self, user_name: str, role_name: str, *args: str) -> None:
        self.set_domain_link_condition_func_params(user_name, role_name, DEFAULT_DOMAIN, *args)

    def set_domain_link_condition_func_params(
        self, user_name: str, role_name: str, domain: str, *args: str
    ) -> None:
        user, _ = self._get_role(user_name)
        role, _ = self._get_role(role_name)
        user._set_link_condition_params(role, domain, args)


class ConditionalDomainManager(DomainManager, ConditionalRoleManagerBase):
    """Per-domain role manager whose links may carry conditions."""

    def _new_role_manager(self) -> ConditionalRoleManager:
        return ConditionalRoleManager(self.max_hierarchy_level, self._matching_func)

    def has_link(self, name1: str, name2: str, *args: str) -> bool:
        return super().has_link(name1, name2, *args)

    def add_link(self, name1: str, name2: str, *args: str) -> None:
        super().add_link(name1, name2, *args)

    def delete_link(self, name1: str, name2: str, *args: str) -> None:
        super().delete_link(name1, name2, *args)

    def _conditional_managers(self) -> list[ConditionalRoleManager]:
        return [rm for rm in list(self._rm_map.values()) if isinstance(rm, ConditionalRoleManager)]

    def add_link_condition_func(self, user_name: str, role_name: str, fn: LinkConditionFunc) -> None:
        """Attach ``fn`` to the link in every existing domain."""
        for rm in self._conditional_managers():
            rm.add_link_condition_func(user_name, role_name, fn)

    def add_domain_link_condition_func(
        self, user_name: str, role_name: str, domain: str, fn: LinkConditionFunc
    ) -> None:
        """Attach ``fn`` to the link keyed by ``domain`` in every existing domain."""
        for rm in self._conditional_managers():
            rm.add_domain_link_condition_func(user_name, role_name, domain, fn)

    def set_link_condition_func_params(self, user_name: str, role_name: str, *args: str) -> None:
        for rm in self._conditional_managers():
            rm.set_link_condition_func_params(user_name, role_name, *args)

    def set_domain_link_condition_func_params(
        self, user_name: str, role_name: str, domain: str, *args: str
    ) -> None:
        for rm in self._conditional_managers():
            rm.set_domain_link_condition_func_params(user_name, role_name, domain, *args)