"""Interfaces for managing role inheritance links."""

from __future__ import annotations

import logging
import warnings
from abc import ABC, abstractmethod
from collections.abc import Callable

MatchingFunc = Callable[[str, str], bool]
"""Decides whether a name (first argument) matches a pattern (second argument)."""

LinkConditionFunc = Callable[..., bool]
"""Decides whether a conditional link is currently valid; may raise on failure."""


def _warn_build_relationship(owner: object, name1: str, name2: str) -> None:
    warnings.warn(
        f"{type(owner).__name__}.build_relationship({name1!r}, {name2!r}) is deprecated: "
        "relationships are built when links are added",
        DeprecationWarning,
        stacklevel=3,
    )


class RoleManagerBase(ABC):
    """Operations for managing roles and the links between them."""

    @abstractmethod
    def clear(self) -> None:
        """Remove all stored data and return to the initial state."""

    @abstractmethod
    def add_link(self, name1: str, name2: str, *args: str) -> None:
        """Make ``name1`` inherit ``name2``; ``args`` may hold a domain."""

    def build_relationship(self, name1: str, name2: str, *args: str) -> None:
        """Deprecated: relationships are built when links are added; only warns."""
        _warn_build_relationship(self, name1, name2)

    @abstractmethod
    def delete_link(self, name1: str, name2: str, *args: str) -> None:
        """Remove the link where ``name1`` inherits ``name2``."""

    @abstractmethod
    def has_link(self, name1: str, name2: str, *args: str) -> bool:
        """Return whether ``name1`` inherits ``name2``, directly or indirectly."""

    @abstractmethod
    def get_roles(self, name: str, *args: str) -> list[str]:
        """Return the roles that ``name`` inherits directly."""

    @abstractmethod
    def get_users(self, name: str, *args: str) -> list[str]:
        """Return the names that inherit the role ``name`` directly."""

    @abstractmethod
    def get_domains(self, name: str) -> list[str]:
        """Return the domains in which ``name`` takes part in a link."""

    @abstractmethod
    def get_all_domains(self) -> list[str]:
        """Return every known domain."""

    @abstractmethod
    def print_roles(self) -> None:
        """Write all role links to the logger."""

    @abstractmethod
    def set_logger(self, logger: logging.Logger) -> None:
        """Use ``logger`` for role output."""

    @abstractmethod
    def match(self, string: str, pattern: str) -> bool:
        """Return whether ``string`` matches ``pattern``."""

    @abstractmethod
    def add_matching_func(self, name: str, fn: MatchingFunc) -> None:
        """Allow role names in links to be patterns matched with ``fn``."""

    @abstractmethod
    def add_domain_matching_func(self, name: str, fn: MatchingFunc) -> None:
        """Allow domains in links to be patterns matched with ``fn``."""


class ConditionalRoleManagerBase(RoleManagerBase):
    """Role manager whose links may carry a condition."""

    @abstractmethod
    def add_link_condition_func(self, user_name: str, role_name: str, fn: LinkConditionFunc) -> None:
        """Attach ``fn`` to the link; the link holds only while ``fn`` returns true."""

    @abstractmethod
    def set_link_condition_func_params(self, user_name: str, role_name: str, *args: str) -> None:
        """Set the arguments passed to the link's condition function."""

    @abstractmethod
    def add_domain_link_condition_func(
        self, user: str, role: str, domain: str, fn: LinkConditionFunc
    ) -> None:
        """Attach ``fn`` to the link within ``domain``."""

    @abstractmethod
    def set_domain_link_condition_func_params(
        self, user: str, role: str, domain: str, *args: str
    ) -> None:
        """Set the arguments of the condition function of the link within ``domain``."""