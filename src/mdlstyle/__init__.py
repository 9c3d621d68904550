"""mdlstyle: load, validate and query markdownlint style files."""

from importlib.metadata import PackageNotFoundError, version

from mdlstyle.catalog import RuleCatalog, RuleEntry
from mdlstyle.config import StyleSettings, load_settings
from mdlstyle.errors import NotFoundError, ParseError, RuleConflictError, StyleError
from mdlstyle.loader import discover_style, dumps, load, loads, save
from mdlstyle.models import RuleExclusion, RuleOverride, StyleDocument, Symbol
from mdlstyle.resolve import EnabledBy, ResolvedRule, resolve_rules

try:
    __version__ = version("mdlstyle")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

__all__ = [
    "EnabledBy",
    "NotFoundError",
    "ParseError",
    "ResolvedRule",
    "RuleCatalog",
    "RuleConflictError",
    "RuleEntry",
    "RuleExclusion",
    "RuleOverride",
    "StyleDocument",
    "StyleError",
    "StyleSettings",
    "Symbol",
    "discover_style",
    "dumps",
    "load",
    "load_settings",
    "loads",
    "resolve_rules",
    "save",
]
