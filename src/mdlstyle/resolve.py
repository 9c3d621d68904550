"""Compute the rules a linter would run for a style document."""

from __future__ import annotations

import logging
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field

from mdlstyle.catalog import RuleCatalog
from mdlstyle.models import StyleDocument

logger = logging.getLogger(__name__)


class EnabledBy(StrEnum):
    RULE_SET = "rule_set"  # all
    TAG = "tag"  # tag :headers
    RULE = "rule"  # rule 'MD013', ...


class ResolvedRule(BaseModel):
    id: str
    alias: str
    tags: list[str] = Field(default_factory=list)
    params: dict[str, Any] = Field(default_factory=dict)
    enabled_by: EnabledBy


def resolve_rules(
    document: StyleDocument,
    catalog: RuleCatalog | None = None,
) -> list[ResolvedRule]:
    """Return active rules in catalog order with defaults merged with overrides."""
    catalog = catalog or RuleCatalog.load()
    overridden = {o.rule_id for o in document.overrides}

    for rule_id in sorted(overridden):
        if catalog.get(rule_id) is None:
            logger.debug("Override for unknown rule %s ignored during resolution", rule_id)

    resolved: list[ResolvedRule] = []
    for entry in catalog.all_rules():
        if document.rule_set and catalog.is_known_rule_set(document.rule_set):
            enabled_by: EnabledBy | None = EnabledBy.RULE_SET
        elif set(entry.tags) & set(document.tags):
            enabled_by = EnabledBy.TAG
        elif entry.id in overridden:
            enabled_by = EnabledBy.RULE
        else:
            enabled_by = None

        if enabled_by is None or document.is_excluded(entry.id):
            continue

        params = dict(entry.params)
        params.update(document.overrides_for(entry.id))
        resolved.append(
            ResolvedRule(
                id=entry.id,
                alias=entry.alias,
                tags=list(entry.tags),
                params=params,
                enabled_by=enabled_by,
            )
        )
    return resolved
