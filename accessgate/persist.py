"""Policy storage model, policy line loading and the adapter and watcher interfaces."""

from __future__ import annotations

import csv
from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable, Iterator, Sequence


class PolicyModel:
    """Policy rules grouped by section ("p", "g") and policy type ("p", "p2", "g", ...)."""

    def __init__(self) -> None:
        self._sections: dict[str, dict[str, list[list[str]]]] = {}

    def has_policy(self, sec: str, ptype: str, rule: Sequence[str]) -> bool:
        """Return whether the exact rule is stored under ``sec``/``ptype``."""
        return list(rule) in self._sections.get(sec, {}).get(ptype, [])

    def add_policy(self, sec: str, ptype: str, rule: Sequence[str]) -> None:
        """Append a copy of ``rule`` under ``sec``/``ptype``."""
        self._sections.setdefault(sec, {}).setdefault(ptype, []).append(list(rule))

    def iter_policies(self, sec: str) -> Iterator[tuple[str, list[str]]]:
        """Yield ``(ptype, rule)`` pairs of a section; rules are copies."""
        for ptype, rules in self._sections.get(sec, {}).items():
            for rule in rules:
                yield ptype, list(rule)


def load_policy_line(line: str, model: PolicyModel) -> None:
    """Parse one comma separated text line and load it as a policy rule.

    Empty lines and lines starting with ``#`` are ignored.
    """
    if not line or line.startswith("#"):
        return
    reader = csv.reader([line], skipinitialspace=True, strict=True)
    tokens = next(reader, None)
    if not tokens:
        return
    load_policy_array(tokens, model)


def load_policy_array(rule: Sequence[str], model: PolicyModel) -> None:
    """Load a rule whose first element is the policy type; duplicates are skipped."""
    if not rule or not rule[0]:
        raise ValueError("policy rule must start with a policy type")
    key = rule[0]
    sec = key[:1]
    values = list(rule[1:])
    if model.has_policy(sec, key, values):
        return
    model.add_policy(sec, key, values)


class Adapter(ABC):
    """Storage backend that loads and saves policy rules."""

    @abstractmethod
    def load_policy(self, model: PolicyModel) -> None:
        """Load all policy rules from the storage into ``model``."""

    @abstractmethod
    def save_policy(self, model: PolicyModel) -> None:
        """Save all policy rules of ``model`` to the storage."""

    @abstractmethod
    def add_policy(self, sec: str, ptype: str, rule: Sequence[str]) -> None:
        """Add a policy rule to the storage."""

    @abstractmethod
    def remove_policy(self, sec: str, ptype: str, rule: Sequence[str]) -> None:
        """Remove a policy rule from the storage."""

    @abstractmethod
    def remove_filtered_policy(self, sec: str, ptype: str, field_index: int, *args: str) -> None:
        """Remove policy rules matching the field filter from the storage."""


class BatchAdapter(Adapter):
    """Adapter that can add and remove several rules at once."""

    @abstractmethod
    def add_policies(self, sec: str, ptype: str, rules: Iterable[Sequence[str]]) -> None:
        """Add policy rules to the storage."""

    @abstractmethod
    def remove_policies(self, sec: str, ptype: str, rules: Iterable[Sequence[str]]) -> None:
        """Remove policy rules from the storage."""


class FilteredAdapter(Adapter):
    """Adapter that can load only the rules matching a filter."""

    @abstractmethod
    def load_filtered_policy(self, model: PolicyModel, filter: object) -> None:
        """Load only policy rules that match ``filter``."""

    @abstractmethod
    def is_filtered(self) -> bool:
        """Return whether the loaded policy has been filtered."""


class UpdatableAdapter(Adapter):
    """Adapter that can update stored rules in place."""

    @abstractmethod
    def update_policy(
        self, sec: str, ptype: str, old_rule: Sequence[str], new_rule: Sequence[str]
    ) -> None:
        """Replace one policy rule in the storage."""

    @abstractmethod
    def update_policies(
        self,
        sec: str,
        ptype: str,
        old_rules: Sequence[Sequence[str]],
        new_rules: Sequence[Sequence[str]],
    ) -> None:
        """Replace several policy rules in the storage."""

    @abstractmethod
    def update_filtered_policies(
        self,
        sec: str,
        ptype: str,
        new_rules: Sequence[Sequence[str]],
        field_index: int,
        *args: str,
    ) -> list[list[str]]:
        """Delete rules matching the filter, add ``new_rules`` and return the deleted rules."""


class Dispatcher(ABC):
    """Propagates policy changes to all enforcer instances."""

    @abstractmethod
    def add_policies(self, sec: str, ptype: str, rules: Iterable[Sequence[str]]) -> None:
        """Add policy rules to all instances."""

    @abstractmethod
    def remove_policies(self, sec: str, ptype: str, rules: Iterable[Sequence[str]]) -> None:
        """Remove policy rules from all instances."""

    @abstractmethod
    def remove_filtered_policy(self, sec: str, ptype: str, field_index: int, *args: str) -> None:
        """Remove policy rules matching the filter from all instances."""

    @abstractmethod
    def clear_policy(self) -> None:
        """Clear all policy in all instances."""

    @abstractmethod
    def update_policy(
        self, sec: str, ptype: str, old_rule: Sequence[str], new_rule: Sequence[str]
    ) -> None:
        """Update a policy rule in all instances."""

    @abstractmethod
    def update_policies(
        self,
        sec: str,
        ptype: str,
        old_rules: Sequence[Sequence[str]],
        new_rules: Sequence[Sequence[str]],
    ) -> None:
        """Update policy rules in all instances."""

    @abstractmethod
    def update_filtered_policies(
        self,
        sec: str,
        ptype: str,
        old_rules: Sequence[Sequence[str]],
        new_rules: Sequence[Sequence[str]],
    ) -> None:
        """Delete ``old_rules`` and add ``new_rules`` in all instances."""


class Watcher(ABC):
    """Notifies other instances that the stored policy has changed."""

    @abstractmethod
    def set_update_callback(self, callback: Callable[[str], None]) -> None:
        """Set the function called when another instance changed the policy."""

    @abstractmethod
    def update(self) -> None:
        """Ask other instances to synchronise their policy."""

    @abstractmethod
    def close(self) -> None:
        """Stop the watcher; the callback is not called any more."""


class WatcherEx(Watcher):
    """Watcher with notifications specific to each kind of change."""

    @abstractmethod
    def update_for_add_policy(self, sec: str, ptype: str, *args: str) -> None:
        """Notify after a policy rule was added."""

    @abstractmethod
    def update_for_remove_policy(self, sec: str, ptype: str, *args: str) -> None:
        """Notify after a policy rule was removed."""

    @abstractmethod
    def update_for_remove_filtered_policy(
        self, sec: str, ptype: str, field_index: int, *args: str
    ) -> None:
        """Notify after filtered policy rules were removed."""

    @abstractmethod
    def update_for_save_policy(self, model: PolicyModel) -> None:
        """Notify after the whole policy was saved."""

    @abstractmethod
    def update_for_add_policies(self, sec: str, ptype: str, *args: Sequence[str]) -> None:
        """Notify after several policy rules were added."""

    @abstractmethod
    def update_for_remove_policies(self, sec: str, ptype: str, *args: Sequence[str]) -> None:
        """Notify after several policy rules were removed."""


class UpdatableWatcher(Watcher):
    """Watcher with notifications for rule updates."""

    @abstractmethod
    def update_for_update_policy(
        self, sec: str, ptype: str, old_rule: Sequence[str], new_rule: Sequence[str]
    ) -> None:
        """Notify after a policy rule was updated."""

    @abstractmethod
    def update_for_update_policies(
        self,
        sec: str,
        ptype: str,
        old_rules: Sequence[Sequence[str]],
        new_rules: Sequence[Sequence[str]],
    ) -> None:
        """Notify after several policy rules were updated."""