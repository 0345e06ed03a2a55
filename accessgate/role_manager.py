"""Default role managers: plain, per-domain, with optional pattern matching."""

from __future__ import annotations

import logging
import warnings
from collections.abc import Iterable, Iterator, Sequence

from accessgate.rbac import LinkConditionFunc, MatchingFunc, RoleManagerBase

DEFAULT_DOMAIN = ""
LOGGER_NAME = "accessgate.rbac"


def _deprecated_build_relationship(owner: object, name1: str, name2: str) -> None:
    warnings.warn(
        f"{type(owner).__name__}.build_relationship({name1!r}, {name2!r}) is deprecated: "
        "relationships are built when links are added",
        DeprecationWarning,
        stacklevel=3,
    )


class Role:
    """A named node of the role graph with its links and pattern matches."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.roles: dict[str, Role] = {}
        self.users: dict[str, Role] = {}
        self.matched: dict[str, Role] = {}
        self.matched_by: dict[str, Role] = {}
        self.link_condition_funcs: dict[tuple[str, str], LinkConditionFunc] = {}
        self.link_condition_params: dict[tuple[str, str], list[str]] = {}

    def __repr__(self) -> str:
        return f"Role({self.name!r})"

    def _add_role(self, role: Role) -> None:
        self.roles[role.name] = role
        role.users[self.name] = self

    def _remove_role(self, role: Role) -> None:
        self.roles.pop(role.name, None)
        role.users.pop(self.name, None)

    def _add_match(self, role: Role) -> None:
        self.matched[role.name] = role
        role.matched_by[self.name] = self

    def _remove_match(self, role: Role) -> None:
        self.matched.pop(role.name, None)
        role.matched_by.pop(self.name, None)

    def _remove_matches(self) -> None:
        for role in list(self.matched.values()):
            self._remove_match(role)
        for role in list(self.matched_by.values()):
            role._remove_match(self)

    def _iter_roles(self) -> Iterator[tuple[str, Role]]:
        """Yield direct roles, roles matching them, and roles of patterns matching this one."""
        yield from list(self.roles.items())
        for role in list(self.roles.values()):
            yield from list(role.matched.items())
        for role in list(self.matched_by.values()):
            yield from list(role.roles.items())

    def _iter_users(self) -> Iterator[tuple[str, Role]]:
        yield from list(self.users.items())
        for role in list(self.users.values()):
            yield from list(role.matched.items())
        for role in list(self.matched_by.values()):
            yield from list(role.users.items())

    def _role_names(self) -> list[str]:
        return list(dict.fromkeys(name for name, _ in self._iter_roles()))

    def _user_names(self) -> list[str]:
        return [name for name, _ in self._iter_users()]

    def _describe(self) -> str:
        roles = self._role_names()
        if not roles:
            return ""
        joined = ", ".join(roles)
        if len(roles) != 1:
            joined = f"({joined})"
        return f"{self.name} < {joined}"

    def _set_link_condition_func(self, role: Role, domain: str, fn: LinkConditionFunc) -> None:
        self.link_condition_funcs[(role.name, domain)] = fn

    def _link_condition_func(self, role: Role, domain: str) -> LinkConditionFunc | None:
        return self.link_condition_funcs.get((role.name, domain))

    def _set_link_condition_params(self, role: Role, domain: str, params: Sequence[str]) -> None:
        self.link_condition_params[(role.name, domain)] = list(params)

    def _link_condition_params(self, role: Role, domain: str) -> list[str] | None:
        params = self.link_condition_params.get((role.name, domain))
        return None if params is None else list(params)


def _iter_links(roles: dict[str, Role]) -> Iterator[tuple[str, str, str]]:
    for user in list(roles.values()):
        for role_name in list(user.roles):
            yield user.name, role_name, DEFAULT_DOMAIN


class RoleManagerImpl(RoleManagerBase):
    """Role manager for a single domain."""

    def __init__(
        self, max_hierarchy_level: int = 10, matching_func: MatchingFunc | None = None
    ) -> None:
        self.max_hierarchy_level = max_hierarchy_level
        self._matching_func = matching_func
        self._domain_matching_func: MatchingFunc | None = None
        self._logger = logging.getLogger(LOGGER_NAME)
        self._all_roles: dict[str, Role] = {}

    def match(self, string: str, pattern: str) -> bool:
        if string == pattern:
            return True
        return self._matching_func is not None and bool(self._matching_func(string, pattern))

    def _matching_roles(self, name: str, is_pattern: bool) -> Iterator[Role]:
        for other_name, role in list(self._all_roles.items()):
            if other_name == name:
                continue
            if is_pattern:
                if self.match(other_name, name):
                    yield role
            elif self.match(name, other_name):
                yield role

    def _get_role(self, name: str) -> tuple[Role, bool]:
        """Return the role named ``name`` and whether it had to be created."""
        role = self._all_roles.get(name)
        if role is not None:
            return role, False
        role = Role(name)
        self._all_roles[name] = role
        if self._matching_func is not None:
            for pattern in self._matching_roles(name, False):
                pattern._add_match(role)
            for concrete in self._matching_roles(name, True):
                role._add_match(concrete)
        return role, True

    def _remove_role(self, name: str) -> None:
        role = self._all_roles.pop(name, None)
        if role is not None:
            role._remove_matches()

    def _rebuild(self) -> None:
        old = self._all_roles
        self.clear()
        for name1, name2, domain in list(_iter_links(old)):
            self.add_link(name1, name2, domain)

    def add_matching_func(self, name: str, fn: MatchingFunc) -> None:
        self._matching_func = fn
        self._rebuild()

    def add_domain_matching_func(self, name: str, fn: MatchingFunc) -> None:
        self._domain_matching_func = fn

    def set_logger(self, logger: logging.Logger) -> None:
        self._logger = logger

    def clear(self) -> None:
        self._all_roles = {}

    def add_link(self, name1: str, name2: str, *args: str) -> None:
        user, _ = self._get_role(name1)
        role, _ = self._get_role(name2)
        user._add_role(role)

    def delete_link(self, name1: str, name2: str, *args: str) -> None:
        user, _ = self._get_role(name1)
        role, _ = self._get_role(name2)
        user._remove_role(role)

    def has_link(self, name1: str, name2: str, *args: str) -> bool:
        if name1 == name2 or (self._matching_func is not None and self.match(name1, name2)):
            return True
        user, user_created = self._get_role(name1)
        role, role_created = self._get_role(name2)
        try:
            return self._has_link_helper(
                role.name, {user.name: user}, self.max_hierarchy_level, args
            )
        finally:
            if role_created:
                self._remove_role(role.name)
            if user_created:
                self._remove_role(user.name)

    def _has_link_helper(
        self, target: str, roles: dict[str, Role], level: int, domains: Sequence[str]
    ) -> bool:
        while level >= 0 and roles:
            next_roles: dict[str, Role] = {}
            for role in roles.values():
                if target == role.name or (
                    self._matching_func is not None and self.match(role.name, target)
                ):
                    return True
                self._collect_next_roles(role, domains, next_roles)
            roles = next_roles
            level -= 1
        return False

    def _collect_next_roles(
        self, role: Role, domains: Sequence[str], next_roles: dict[str, Role]
    ) -> None:
        next_roles.update(role._iter_roles())

    def get_roles(self, name: str, *args: str) -> list[str]:
        user, created = self._get_role(name)
        try:
            return user._role_names()
        finally:
            if created:
                self._remove_role(user.name)

    def get_users(self, name: str, *args: str) -> list[str]:
        role, created = self._get_role(name)
        try:
            return role._user_names()
        finally:
            if created:
                self._remove_role(role.name)

    def _describe_lines(self) -> list[str]:
        return [text for role in list(self._all_roles.values()) if (text := role._describe())]

    def print_roles(self) -> None:
        if not self._logger.isEnabledFor(logging.INFO):
            return
        for line in self._describe_lines():
            self._logger.info("%s", line)

    def get_domains(self, name: str) -> list[str]:
        return [DEFAULT_DOMAIN]

    def get_all_domains(self) -> list[str]:
        return [DEFAULT_DOMAIN]

    def links(self) -> Iterator[tuple[str, str, str]]:
        """Yield every link as ``(user, role, domain)``."""
        return _iter_links(self._all_roles)

    def _copy_from(self, other: RoleManagerImpl) -> None:
        for name1, name2, domain in list(other.links()):
            self.add_link(name1, name2, domain)

    def build_relationship(self, name1: str, name2: str, *args: str) -> None:
        """Deprecated: relationships are built when links are added; only warns."""
        _deprecated_build_relationship(self, name1, name2)


class DomainManager(RoleManagerBase):
    """Role manager keeping one role graph per domain."""

    def __init__(self, max_hierarchy_level: int = 10) -> None:
        self.max_hierarchy_level = max_hierarchy_level
        self._matching_func: MatchingFunc | None = None
        self._domain_matching_func: MatchingFunc | None = None
        self._logger = logging.getLogger(LOGGER_NAME)
        self._rm_map: dict[str, RoleManagerImpl] = {}

    def _new_role_manager(self) -> RoleManagerImpl:
        return RoleManagerImpl(self.max_hierarchy_level, self._matching_func)

    def set_logger(self, logger: logging.Logger) -> None:
        self._logger = logger

    def add_matching_func(self, name: str, fn: MatchingFunc) -> None:
        self._matching_func = fn
        for rm in list(self._rm_map.values()):
            rm.add_matching_func(name, fn)

    def add_domain_matching_func(self, name: str, fn: MatchingFunc) -> None:
        self._domain_matching_func = fn
        for rm in list(self._rm_map.values()):
            rm.add_domain_matching_func(name, fn)
        self._rebuild()

    def _rebuild(self) -> None:
        old = self._rm_map
        self.clear()
        for domain, rm in old.items():
            for name1, name2, _ in list(rm.links()):
                self.add_link(name1, name2, domain)

    def clear(self) -> None:
        self._rm_map = {}

    @staticmethod
    def _get_domain(domains: Sequence[str]) -> str:
        return domains[0] if domains else DEFAULT_DOMAIN

    def match(self, string: str, pattern: str) -> bool:
        if string == pattern:
            return True
        return self._domain_matching_func is not None and bool(
            self._domain_matching_func(string, pattern)
        )

    def _affected_role_managers(self, domain: str) -> Iterable[RoleManagerImpl]:
        if self._domain_matching_func is None:
            return []
        return [
            rm
            for other, rm in list(self._rm_map.items())
            if other != domain and self.match(other, domain)
        ]

    def _get_role_manager(self, domain: str, store: bool) -> RoleManagerImpl:
        rm = self._rm_map.get(domain)
        if rm is not None:
            return rm
        rm = self._new_role_manager()
        if store:
            self._rm_map[domain] = rm
        if self._domain_matching_func is not None:
            for other, other_rm in list(self._rm_map.items()):
                if other != domain and self.match(domain, other):
                    rm._copy_from(other_rm)
        return rm

    def add_link(self, name1: str, name2: str, *args: str) -> None:
        domain = self._get_domain(args)
        self._get_role_manager(domain, True).add_link(name1, name2, domain)
        for rm in self._affected_role_managers(domain):
            rm.add_link(name1, name2, domain)

    def delete_link(self, name1: str, name2: str, *args: str) -> None:
        domain = self._get_domain(args)
        self._get_role_manager(domain, True).delete_link(name1, name2, domain)
        for rm in self._affected_role_managers(domain):
            rm.delete_link(name1, name2, domain)

    def has_link(self, name1: str, name2: str, *args: str) -> bool:
        domain = self._get_domain(args)
        return self._get_role_manager(domain, False).has_link(name1, name2, *args)

    def get_roles(self, name: str, *args: str) -> list[str]:
        domain = self._get_domain(args)
        return self._get_role_manager(domain, False).get_roles(name, *args)

    def get_users(self, name: str, *args: str) -> list[str]:
        domain = self._get_domain(args)
        return self._get_role_manager(domain, False).get_users(name, *args)

    def _describe_lines(self) -> list[str]:
        return [
            f"{domain}: {', '.join(rm._describe_lines())}"
            for domain, rm in list(self._rm_map.items())
        ]

    def print_roles(self) -> None:
        if not self._logger.isEnabledFor(logging.INFO):
            return
        for line in self._describe_lines():
            self._logger.info("%s", line)

    def get_domains(self, name: str) -> list[str]:
        domains = []
        for domain, rm in list(self._rm_map.items()):
            role, created = rm._get_role(name)
            try:
                if role._user_names() or role._role_names():
                    domains.append(domain)
            finally:
                if created:
                    rm._remove_role(role.name)
        return domains

    def get_all_domains(self) -> list[str]:
        return list(self._rm_map)

    def build_relationship(self, name1: str, name2: str, *args: str) -> None:
        """Deprecated: relationships are built when links are added; only warns."""
        _deprecated_build_relationship(self, name1, name2)


class RoleManager(DomainManager):
    """The default role manager, supporting domains."""