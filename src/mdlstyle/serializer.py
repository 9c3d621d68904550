"""Canonical writer for style documents."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from mdlstyle.models import SYMBOL_NAME, StyleDocument, Symbol

# Characters that only a double-quoted string can spell on one line.
_DQ_ONLY = {"\n": "\\n", "\t": "\\t", "\r": "\\r"}


def dump_style(document: StyleDocument) -> str:
    """Render ``document`` in canonical style-file form.

    Sections are separated by blank lines: preamble comments, rule set and
    tags, rule overrides, then exclusions with their comments.
    """
    sections: list[list[str]] = []

    if document.preamble:
        sections.append([_comment(line) for line in document.preamble])

    enabled: list[str] = []
    if document.rule_set:
        enabled.append(document.rule_set)
    enabled.extend(f"tag {_name(tag)}" for tag in document.tags)
    if enabled:
        sections.append(enabled)

    if document.overrides:
        sections.append([_rule_line(o.rule_id, o.options) for o in document.overrides])

    excluded = [f"exclude_tag {_name(tag)}" for tag in document.excluded_tags]
    for exclusion in document.exclusions:
        excluded.extend(_comment(line) for line in exclusion.comment)
        excluded.append(f"exclude_rule {format_value(exclusion.rule_id)}")
    if excluded:
        sections.append(excluded)

    if not sections:
        return ""
    return "\n\n".join("\n".join(lines) for lines in sections) + "\n"


def format_value(value: Any) -> str:
    """Format an option value as it would appear in a style file."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Symbol):
        return f":{value}"
    if isinstance(value, str):
        if any(c in value for c in _DQ_ONLY):
            escaped = value.replace("\\", "\\\\").replace('"', '\\"')
            for char, escape in _DQ_ONLY.items():
                escaped = escaped.replace(char, escape)
            return f'"{escaped}"'
        escaped = value.replace("\\", "\\\\").replace("'", "\\'")
        return f"'{escaped}'"
    return repr(value)


def _rule_line(rule_id: str, options: Mapping[str, Any]) -> str:
    parts = [f"rule {format_value(rule_id)}"]
    parts.extend(f"{_name(name)} => {format_value(value)}" for name, value in options.items())
    return ", ".join(parts)


def _name(name: str) -> str:
    # Option keys and tags are symbols unless they cannot be spelled as one.
    if SYMBOL_NAME.match(name):
        return f":{name}"
    return format_value(name)


def _comment(line: str) -> str:
    return f"# {line}" if line else "#"
