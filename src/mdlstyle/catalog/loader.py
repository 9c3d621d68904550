"""RuleCatalog: load and query the bundled list of known rules."""

from __future__ import annotations

import json
from importlib import resources
from pathlib import Path

from mdlstyle.catalog.models import RuleEntry


class RuleCatalog:
    """Known rules and rule sets, loaded from rules.json."""

    def __init__(self, rules: list[RuleEntry], rule_sets: list[str]) -> None:
        self._rules = rules
        self._by_id: dict[str, RuleEntry] = {r.id: r for r in rules}
        self._by_alias: dict[str, RuleEntry] = {r.alias: r for r in rules}
        self._rule_sets = list(rule_sets)

    @classmethod
    def load(cls) -> RuleCatalog:
        """Load from bundled package data."""
        pkg = resources.files("mdlstyle.catalog")
        data = json.loads(pkg.joinpath("rules.json").read_text(encoding="utf-8"))
        return cls._from_dict(data)

    @classmethod
    def from_json(cls, path: Path) -> RuleCatalog:
        """Load from explicit file path (for testing)."""
        data = json.loads(path.read_text(encoding="utf-8"))
        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict) -> RuleCatalog:
        rules = [RuleEntry.model_validate(r) for r in data["rules"]]
        rule_sets = data.get("rule_sets", ["all"])
        return cls(rules, rule_sets)

    def get(self, name: str) -> RuleEntry | None:
        """Look a rule up by id (case-insensitive) or alias."""
        return self._by_id.get(name.upper()) or self._by_alias.get(name.lower())

    def canonical_id(self, name: str) -> str | None:
        entry = self.get(name)
        return entry.id if entry else None

    def all_rules(self) -> list[RuleEntry]:
        return list(self._rules)

    def all_tags(self) -> list[str]:
        tags: list[str] = []
        for rule in self._rules:
            for tag in rule.tags:
                if tag not in tags:
                    tags.append(tag)
        return sorted(tags)

    def rules_with_tag(self, tag: str) -> list[RuleEntry]:
        return [r for r in self._rules if tag in r.tags]

    @property
    def rule_sets(self) -> list[str]:
        return list(self._rule_sets)

    def is_known_rule_set(self, name: str) -> bool:
        return name in self._rule_sets
