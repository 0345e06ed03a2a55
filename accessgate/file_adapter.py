"""Adapters that load policy rules from, and save them to, a text file."""

from __future__ import annotations

import os
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from typing import NoReturn

from accessgate.persist import (
    BatchAdapter,
    FilteredAdapter,
    PolicyModel,
    UpdatableAdapter,
    load_policy_line,
)


class UnsupportedOperationError(NotImplementedError):
    """Raised by adapters for operations their storage does not offer."""

    def __init__(self, message: str = "operation not supported by this adapter") -> None:
        super().__init__(message)


def _refuse(adapter: object, operation: str, sec: str, ptype: str) -> NoReturn:
    """Raise for an incremental change the adapter's storage cannot make."""
    raise UnsupportedOperationError(
        f"{type(adapter).__name__} does not support {operation} "
        f"(section {sec!r}, type {ptype!r}); load and save the whole policy instead"
    )


def _policy_text(model: PolicyModel) -> str:
    """Render the "p" then "g" rules of ``model`` as one line per rule."""
    lines = [
        f"{ptype}, {', '.join(rule)}"
        for sec in ("p", "g")
        for ptype, rule in model.iter_policies(sec)
    ]
    return "\n".join(lines).rstrip("\n")


_EMPTY_PATH = "invalid file path, file path cannot be empty"


class FileAdapter(BatchAdapter, UpdatableAdapter):
    """Loads the whole policy from a file and saves it back; no incremental changes."""

    def __init__(self, file_path: str | os.PathLike[str]) -> None:
        self.file_path = os.fspath(file_path)

    def _check_path(self) -> None:
        if not self.file_path:
            raise ValueError(_EMPTY_PATH)

    def _load_lines(
        self, model: PolicyModel, skip: Callable[[str], bool] = lambda line: False
    ) -> None:
        with open(self.file_path, encoding="utf-8") as handle:
            for raw in handle:
                line = raw.strip()
                if skip(line):
                    continue
                load_policy_line(line, model)

    def load_policy(self, model: PolicyModel) -> None:
        self._check_path()
        self._load_lines(model)

    def save_policy(self, model: PolicyModel) -> None:
        self._check_path()
        with open(self.file_path, "w", encoding="utf-8", newline="") as handle:
            handle.write(_policy_text(model))

    def add_policy(self, sec: str, ptype: str, rule: Sequence[str]) -> None:
        _refuse(self, "add_policy", sec, ptype)

    def add_policies(self, sec: str, ptype: str, rules: Iterable[Sequence[str]]) -> None:
        _refuse(self, "add_policies", sec, ptype)

    def remove_policy(self, sec: str, ptype: str, rule: Sequence[str]) -> None:
        _refuse(self, "remove_policy", sec, ptype)

    def remove_policies(self, sec: str, ptype: str, rules: Iterable[Sequence[str]]) -> None:
        _refuse(self, "remove_policies", sec, ptype)

    def remove_filtered_policy(self, sec: str, ptype: str, field_index: int, *args: str) -> None:
        _refuse(self, "remove_filtered_policy", sec, ptype)

    def update_policy(
        self, sec: str, ptype: str, old_rule: Sequence[str], new_rule: Sequence[str]
    ) -> None:
        _refuse(self, "update_policy", sec, ptype)

    def update_policies(
        self,
        sec: str,
        ptype: str,
        old_rules: Sequence[Sequence[str]],
        new_rules: Sequence[Sequence[str]],
    ) -> None:
        _refuse(self, "update_policies", sec, ptype)

    def update_filtered_policies(
        self,
        sec: str,
        ptype: str,
        new_rules: Sequence[Sequence[str]],
        field_index: int,
        *args: str,
    ) -> list[list[str]]:
        _refuse(self, "update_filtered_policies", sec, ptype)


@dataclass
class Filter:
    """Field values a rule of each policy type must have; empty values match anything."""

    p: list[str] = field(default_factory=list)
    g: list[str] = field(default_factory=list)
    g1: list[str] = field(default_factory=list)
    g2: list[str] = field(default_factory=list)
    g3: list[str] = field(default_factory=list)
    g4: list[str] = field(default_factory=list)
    g5: list[str] = field(default_factory=list)

    def values_for(self, ptype: str) -> list[str]:
        """Return the filter values for ``ptype``; unknown types have none."""
        return {
            "p": self.p,
            "g": self.g,
            "g1": self.g1,
            "g2": self.g2,
            "g3": self.g3,
            "g4": self.g4,
            "g5": self.g5,
        }.get(ptype, [])

    def rejects(self, line: str) -> bool:
        """Return whether a policy text line is to be skipped under this filter."""
        parts = line.split(",")
        wanted = self.values_for(parts[0].strip())
        if len(parts) < len(wanted) + 1:
            return True
        return any(
            value and value.strip() != part.strip()
            for value, part in zip(wanted, parts[1:])
        )


class FilteredFileAdapter(FileAdapter, FilteredAdapter):
    """File adapter that can also load only the rules matching a Filter."""

    def __init__(self, file_path: str | os.PathLike[str]) -> None:
        super().__init__(file_path)
        self._filtered = True

    def load_policy(self, model: PolicyModel) -> None:
        self._filtered = False
        super().load_policy(model)

    def load_filtered_policy(self, model: PolicyModel, filter: object) -> None:
        """Load only matching rules; a filter of None loads everything."""
        if filter is None:
            self.load_policy(model)
            return
        self._check_path()
        if not isinstance(filter, Filter):
            raise TypeError("invalid filter type")
        self._load_lines(model, filter.rejects)
        self._filtered = True

    def is_filtered(self) -> bool:
        return self._filtered

    def save_policy(self, model: PolicyModel) -> None:
        if self._filtered:
            raise RuntimeError("cannot save a filtered policy")
        super().save_policy(model)