"""Adapter that keeps the policy as text in memory."""

from __future__ import annotations

import csv
from collections.abc import Sequence

from accessgate.file_adapter import _policy_text, _refuse
from accessgate.persist import Adapter, PolicyModel, load_policy_line


class StringAdapter(Adapter):
    """Loads policy rules from ``line`` and saves them back into it."""

    def __init__(self, line: str) -> None:
        self.line = line

    def load_policy(self, model: PolicyModel) -> None:
        """Load every line of the text; malformed lines are skipped."""
        if not self.line:
            raise ValueError("invalid line, line cannot be empty")
        for text in self.line.split("\n"):
            if not text:
                continue
            try:
                load_policy_line(text, model)
            except (csv.Error, ValueError):
                continue

    def save_policy(self, model: PolicyModel) -> None:
        self.line = _policy_text(model)

    def add_policy(self, sec: str, ptype: str, rule: Sequence[str]) -> None:
        _refuse(self, "add_policy", sec, ptype)

    def remove_policy(self, sec: str, ptype: str, rule: Sequence[str]) -> None:
        """Drop the whole stored text."""
        self.line = ""

    def remove_filtered_policy(self, sec: str, ptype: str, field_index: int, *args: str) -> None:
        _refuse(self, "remove_filtered_policy", sec, ptype)