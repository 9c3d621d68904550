"""Line-oriented parser for mdl style files (the ``.mdl_style.rb`` DSL)."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from mdlstyle.catalog import RuleCatalog, RuleEntry
from mdlstyle.errors import ParseError, RuleConflictError
from mdlstyle.models import RuleExclusion, RuleOverride, StyleDocument, Symbol

logger = logging.getLogger(__name__)

_TOKEN = re.compile(
    r"""
    (?P<string>'(?:[^'\\]|\\.)*'|"(?:[^"\\]|\\.)*")
  | (?P<symbol>:[A-Za-z_][A-Za-z0-9_]*[?!]?)
  | (?P<label>[A-Za-z_][A-Za-z0-9_]*:)(?!:)
  | (?P<number>[-+]?\d+(?:\.\d+)?(?:[eE][-+]?\d+)?(?![A-Za-z0-9_.]))
  | (?P<arrow>=>)
  | (?P<punct>[,()])
  | (?P<name>[A-Za-z_][A-Za-z0-9_]*)
  | (?P<comment>\#.*)
    """,
    re.VERBOSE,
)

_DQ_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", '"': '"', "\\": "\\"}

_KEYWORDS = ("rule", "exclude_rule", "tag", "exclude_tag")


@dataclass
class _Token:
    kind: str
    text: str


@dataclass
class _Statement:
    keyword: str
    line: int
    args: list[Any] = field(default_factory=list)
    options: dict[str, Any] = field(default_factory=dict)
    trailing_comment: str | None = None


def parse_style(
    text: str,
    *,
    path: Path | None = None,
    catalog: RuleCatalog | None = None,
    strict: bool = True,
) -> StyleDocument:
    """Parse style file contents into a StyleDocument.

    In strict mode rule ids, option names, option types and tags are checked
    against the catalog; otherwise only the rule set name is. Raises
    ParseError (or RuleConflictError) on the first problem found.
    """
    builder = _DocumentBuilder(catalog or RuleCatalog.load(), path=path, strict=strict)
    for lineno, raw in enumerate(text.splitlines(), start=1):
        builder.feed(raw, lineno)
    document = builder.build()
    logger.debug(
        "Parsed style %s: rule_set=%s, %d overrides, %d exclusions",
        path or "<string>",
        document.rule_set,
        len(document.overrides),
        len(document.exclusions),
    )
    return document


class _DocumentBuilder:
    def __init__(self, catalog: RuleCatalog, *, path: Path | None, strict: bool) -> None:
        self._catalog = catalog
        self._path = path
        self._strict = strict
        self._rule_set: str | None = None
        self._tags: list[str] = []
        self._excluded_tags: list[str] = []
        self._overrides: dict[str, dict[str, Any]] = {}
        self._exclusions: dict[str, tuple[str, ...]] = {}
        self._preamble: list[str] = []
        self._block: list[str] = []
        self._seen_statement = False

    def feed(self, raw: str, lineno: int) -> None:
        tokens, comment = self._tokenize(raw, lineno)
        if not tokens:
            if comment is not None:
                self._block.append(comment)
            else:
                # A blank line ends the current comment block.
                if not self._seen_statement:
                    self._preamble.extend(self._block)
                self._block = []
            return

        statement = self._statement(tokens, lineno)
        statement.trailing_comment = comment
        if not self._seen_statement and statement.keyword != "exclude_rule":
            # Comments above the first statement belong to the file, not to it.
            self._preamble.extend(self._block)
        self._apply(statement)
        self._seen_statement = True
        self._block = []

    def build(self) -> StyleDocument:
        if not self._seen_statement:
            self._preamble.extend(self._block)
        tag_excluded = {
            rule.id for tag in self._excluded_tags for rule in self._catalog.rules_with_tag(tag)
        }
        return StyleDocument(
            rule_set=self._rule_set,
            tags=tuple(self._tags),
            overrides=tuple(
                RuleOverride(rule_id=rule_id, options=options)
                for rule_id, options in self._overrides.items()
            ),
            excluded_tags=tuple(self._excluded_tags),
            exclusions=tuple(
                RuleExclusion(rule_id=rule_id, comment=comment)
                for rule_id, comment in self._exclusions.items()
            ),
            tag_excluded_rules=frozenset(tag_excluded),
            preamble=tuple(self._preamble),
        )

    # -- statements ---------------------------------------------------------

    def _apply(self, stmt: _Statement) -> None:
        if stmt.keyword == "rule":
            self._add_override(stmt)
        elif stmt.keyword == "exclude_rule":
            self._add_exclusion(stmt)
        elif stmt.keyword == "tag":
            self._add_tag(stmt, excluded=False)
        elif stmt.keyword == "exclude_tag":
            self._add_tag(stmt, excluded=True)
        else:
            self._enable_rule_set(stmt)

    def _enable_rule_set(self, stmt: _Statement) -> None:
        name = stmt.keyword
        if not self._catalog.is_known_rule_set(name):
            known = ", ".join(self._catalog.rule_sets)
            raise self._error(f"unknown rule set '{name}' (known: {known})", stmt.line)
        if self._rule_set is not None and self._rule_set != name:
            raise self._error(
                f"rule set '{name}' conflicts with already enabled '{self._rule_set}'", stmt.line
            )
        self._rule_set = name

    def _add_override(self, stmt: _Statement) -> None:
        rule_id = self._rule_id(stmt)
        if rule_id in self._exclusions:
            raise RuleConflictError(
                f"rule {rule_id} is excluded and cannot also be configured",
                path=self._path,
                line=stmt.line,
            )
        entry = self._catalog.get(rule_id)
        if self._strict and entry is not None:
            for name, value in stmt.options.items():
                self._check_option(entry, name, value, stmt.line)
        self._overrides.setdefault(rule_id, {}).update(stmt.options)

    def _add_exclusion(self, stmt: _Statement) -> None:
        if stmt.options:
            raise self._error("exclude_rule takes no options", stmt.line)
        rule_id = self._rule_id(stmt)
        if rule_id in self._overrides:
            raise RuleConflictError(
                f"rule {rule_id} is configured and cannot also be excluded",
                path=self._path,
                line=stmt.line,
            )
        if rule_id in self._exclusions:
            logger.debug("Duplicate exclusion of %s on line %d ignored", rule_id, stmt.line)
            return
        comment = tuple(self._block)
        if not comment and stmt.trailing_comment is not None:
            comment = (stmt.trailing_comment,)
        self._exclusions[rule_id] = comment

    def _add_tag(self, stmt: _Statement, *, excluded: bool) -> None:
        if len(stmt.args) != 1 or stmt.options or not isinstance(stmt.args[0], str):
            raise self._error(f"{stmt.keyword} expects a single tag name", stmt.line)
        tag = str(stmt.args[0])
        if self._strict and not self._catalog.rules_with_tag(tag):
            raise self._error(f"unknown tag '{tag}'", stmt.line)
        target, other = (
            (self._excluded_tags, self._tags) if excluded else (self._tags, self._excluded_tags)
        )
        if tag in other:
            raise RuleConflictError(
                f"tag '{tag}' is both enabled and excluded", path=self._path, line=stmt.line
            )
        if tag not in target:
            target.append(tag)

    def _rule_id(self, stmt: _Statement) -> str:
        if len(stmt.args) != 1 or type(stmt.args[0]) is not str:
            raise self._error(f"{stmt.keyword} expects a single quoted rule id", stmt.line)
        name = stmt.args[0]
        canonical = self._catalog.canonical_id(name)
        if canonical is None:
            if self._strict:
                raise self._error(f"unknown rule '{name}'", stmt.line)
            return name
        return canonical

    def _check_option(self, entry: RuleEntry, name: str, value: Any, lineno: int) -> None:
        if name not in entry.params:
            raise self._error(f"rule {entry.id} has no option '{name}'", lineno)
        default = entry.params[name]
        if isinstance(default, bool):
            ok = isinstance(value, bool)
        elif isinstance(default, int):
            ok = isinstance(value, int) and not isinstance(value, bool)
        elif isinstance(default, float):
            ok = isinstance(value, (int, float)) and not isinstance(value, bool)
        else:
            ok = isinstance(value, str)
        if not ok:
            raise self._error(
                f"option '{name}' of {entry.id} expects {type(default).__name__}, "
                f"got {_type_name(value)}",
                lineno,
            )

    # -- lexing -------------------------------------------------------------

    def _tokenize(self, raw: str, lineno: int) -> tuple[list[_Token], str | None]:
        tokens: list[_Token] = []
        pos = 0
        while pos < len(raw):
            if raw[pos].isspace():
                pos += 1
                continue
            match = _TOKEN.match(raw, pos)
            if match is None:
                if raw[pos] in "'\"":
                    raise self._error("unterminated string", lineno)
                raise self._error(f"unexpected character {raw[pos]!r}", lineno)
            kind = match.lastgroup or ""
            if kind == "comment":
                return tokens, _comment_text(match.group())
            tokens.append(_Token(kind, match.group()))
            pos = match.end()
        return tokens, None

    def _statement(self, tokens: list[_Token], lineno: int) -> _Statement:
        head, rest = tokens[0], tokens[1:]
        if head.kind != "name":
            raise self._error(f"expected a statement, found {head.text!r}", lineno)
        stmt = _Statement(keyword=head.text, line=lineno)

        if rest and rest[0].text == "(":
            if rest[-1].text != ")":
                raise self._error("missing closing parenthesis", lineno)
            rest = rest[1:-1]

        for group in self._split_args(rest, lineno):
            if len(group) == 1:
                if stmt.options:
                    raise self._error("positional argument after options", lineno)
                stmt.args.append(self._value(group[0], lineno))
                continue
            key, value = self._option(group, lineno)
            if key in stmt.options:
                raise self._error(f"option '{key}' given twice", lineno)
            stmt.options[key] = value
        if stmt.keyword not in _KEYWORDS and (stmt.args or stmt.options):
            raise self._error(f"unknown statement '{stmt.keyword}'", lineno)
        return stmt

    def _split_args(self, tokens: list[_Token], lineno: int) -> list[list[_Token]]:
        if not tokens:
            return []
        groups: list[list[_Token]] = [[]]
        for token in tokens:
            if token.text in ("(", ")"):
                raise self._error(f"unexpected {token.text!r}", lineno)
            if token.text == ",":
                if not groups[-1]:
                    raise self._error("unexpected ','", lineno)
                groups.append([])
            else:
                groups[-1].append(token)
        if not groups[-1]:
            raise self._error("trailing ','", lineno)
        return groups

    def _option(self, group: list[_Token], lineno: int) -> tuple[str, Any]:
        if len(group) == 2 and group[0].kind == "label":
            return group[0].text[:-1], self._value(group[1], lineno)
        if len(group) == 3 and group[1].kind == "arrow":
            key = group[0]
            if key.kind == "symbol":
                return key.text[1:], self._value(group[2], lineno)
            if key.kind == "string":
                return _unquote(key.text), self._value(group[2], lineno)
        text = " ".join(t.text for t in group)
        raise self._error(f"malformed argument {text!r}", lineno)

    def _value(self, token: _Token, lineno: int) -> Any:
        if token.kind == "string":
            return _unquote(token.text)
        if token.kind == "symbol":
            return Symbol(token.text[1:])
        if token.kind == "number":
            if any(c in token.text for c in ".eE"):
                return float(token.text)
            return int(token.text)
        if token.kind == "name" and token.text in ("true", "false"):
            return token.text == "true"
        raise self._error(f"malformed value {token.text!r}", lineno)

    def _error(self, message: str, lineno: int) -> ParseError:
        return ParseError(message, path=self._path, line=lineno)


def _unquote(text: str) -> str:
    body = text[1:-1]
    if text[0] == "'":
        return re.sub(r"\\([\\'])", r"\1", body)
    return re.sub(r"\\(.)", lambda m: _DQ_ESCAPES.get(m.group(1), m.group(0)), body)


def _comment_text(raw: str) -> str:
    text = raw[1:]
    if text.startswith(" "):
        text = text[1:]
    return text.rstrip()


def _type_name(value: Any) -> str:
    if isinstance(value, Symbol):
        return "symbol"
    return type(value).__name__
