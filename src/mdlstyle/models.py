"""Pydantic models for style documents."""

from __future__ import annotations

import math
import re
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

SYMBOL_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*[?!]?$")

_EMPTY: Mapping[str, Any] = MappingProxyType({})


class Symbol(str):
    """An enumerated option value, written ``:name`` in a style file.

    Compares equal to the plain string, so lookups stay simple; the type only
    matters when the value is written back out.
    """

    __slots__ = ()

    def __repr__(self) -> str:
        return f"Symbol({str(self)!r})"


def _check_option_value(name: str, value: Any) -> Any:
    if not isinstance(value, (bool, int, float, str)):
        raise ValueError(f"option '{name}' has unsupported value type {type(value).__name__}")
    if isinstance(value, float) and not math.isfinite(value):
        raise ValueError(f"option '{name}' must be a finite number")
    if isinstance(value, Symbol) and not SYMBOL_NAME.match(value):
        raise ValueError(f"option '{name}' has invalid symbol :{value}")
    return value


class RuleOverride(BaseModel):
    """Option values applied to a single enabled rule."""

    model_config = ConfigDict(frozen=True)

    rule_id: str
    options: Mapping[str, Any] = Field(default_factory=dict, validate_default=True)

    @field_validator("options")
    @classmethod
    def _validate_options(cls, options: Mapping[str, Any]) -> Mapping[str, Any]:
        for name, value in options.items():
            _check_option_value(name, value)
        return MappingProxyType(dict(options))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RuleOverride):
            return NotImplemented
        if not super().__eq__(other):
            return False
        # Symbol compares equal to str; :atx and 'atx' are still different values.
        return all(
            isinstance(value, Symbol) == isinstance(other.options[name], Symbol)
            for name, value in self.options.items()
        )

    __hash__ = None  # type: ignore[assignment]


class RuleExclusion(BaseModel):
    """A disabled rule with the comment lines that justify it."""

    model_config = ConfigDict(frozen=True)

    rule_id: str
    comment: tuple[str, ...] = ()


class StyleDocument(BaseModel):
    """Immutable view of one style file."""

    model_config = ConfigDict(frozen=True)

    rule_set: str | None = None
    tags: tuple[str, ...] = ()
    overrides: tuple[RuleOverride, ...] = ()
    excluded_tags: tuple[str, ...] = ()
    exclusions: tuple[RuleExclusion, ...] = ()
    # Rule ids pulled in by excluded_tags, expanded against the catalog at load time.
    tag_excluded_rules: frozenset[str] = frozenset()
    preamble: tuple[str, ...] = ()

    @model_validator(mode="after")
    def _check_conflicts(self) -> StyleDocument:
        overridden = {o.rule_id for o in self.overrides}
        clashing = sorted(overridden & self.excluded_rule_ids())
        if clashing:
            raise ValueError(f"rules both overridden and excluded: {', '.join(clashing)}")
        tag_clash = sorted(set(self.tags) & set(self.excluded_tags))
        if tag_clash:
            raise ValueError(f"tags both enabled and excluded: {', '.join(tag_clash)}")
        return self

    def excluded_rule_ids(self) -> set[str]:
        return {e.rule_id for e in self.exclusions}

    def is_excluded(self, rule_id: str) -> bool:
        """True if the rule is excluded by name or through an excluded tag."""
        if rule_id in self.tag_excluded_rules:
            return True
        return any(e.rule_id == rule_id for e in self.exclusions)

    def overrides_for(self, rule_id: str) -> Mapping[str, Any]:
        """Read-only option mapping for ``rule_id``; empty when not overridden."""
        for override in self.overrides:
            if override.rule_id == rule_id:
                return override.options
        return _EMPTY

    def exclusion_comment(self, rule_id: str) -> str | None:
        for exclusion in self.exclusions:
            if exclusion.rule_id == rule_id:
                return "\n".join(exclusion.comment) if exclusion.comment else None
        return None
