"""Load style documents from disk and locate them in a project."""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path

from mdlstyle.catalog import RuleCatalog
from mdlstyle.config import DEFAULT_STYLE_FILENAME
from mdlstyle.errors import NotFoundError, ParseError
from mdlstyle.models import StyleDocument
from mdlstyle.parser import parse_style
from mdlstyle.serializer import dump_style

logger = logging.getLogger(__name__)

MDLRC_FILENAME = ".mdlrc"

_MDLRC_STYLE = re.compile(r"""^\s*style\s+(?:'([^']*)'|"([^"]*)"|(\S+))\s*(?:#.*)?$""")


def load(
    path: Path | str,
    *,
    strict: bool = True,
    catalog: RuleCatalog | None = None,
) -> StyleDocument:
    """Read and parse the style file at ``path``.

    Raises NotFoundError when the file is missing and ParseError when its
    contents are malformed. Nothing is returned for a broken file.
    """
    path = Path(path)
    if not path.is_file():
        raise NotFoundError(path)
    logger.debug("Loading style from %s (strict=%s)", path, strict)
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ParseError(f"not valid UTF-8: {e.reason}", path=path) from e
    return parse_style(text, path=path, catalog=catalog, strict=strict)


def loads(
    text: str,
    *,
    path: Path | None = None,
    strict: bool = True,
    catalog: RuleCatalog | None = None,
) -> StyleDocument:
    """Parse style file contents held in memory."""
    return parse_style(text, path=path, catalog=catalog, strict=strict)


def dumps(document: StyleDocument) -> str:
    return dump_style(document)


def save(document: StyleDocument, path: Path) -> None:
    """Write ``document`` to ``path`` in canonical form."""
    path.write_text(dump_style(document), encoding="utf-8")
    logger.debug("Wrote style to %s", path)


def discover_style(project_root: Path, *, filename: str = DEFAULT_STYLE_FILENAME) -> Path | None:
    """Find the style file a linter run from ``project_root`` would use.

    Order: MDLSTYLE_PATH env var, ``<root>/<filename>``, then the ``style``
    entry of ``<root>/.mdlrc``. Returns None when nothing is configured.
    """
    if env_path := os.environ.get("MDLSTYLE_PATH"):
        return Path(env_path)

    candidate = project_root / filename
    if candidate.is_file():
        return candidate

    mdlrc = project_root / MDLRC_FILENAME
    if mdlrc.is_file():
        style = _read_mdlrc_style(mdlrc)
        if style is not None:
            style_path = Path(style).expanduser()
            if not style_path.is_absolute():
                style_path = project_root / style_path
            return style_path

    return None


def _read_mdlrc_style(mdlrc: Path) -> str | None:
    for line in mdlrc.read_text(encoding="utf-8").splitlines():
        match = _MDLRC_STYLE.match(line)
        if match:
            return next(g for g in match.groups() if g is not None)
    return None
