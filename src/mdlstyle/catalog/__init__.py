"""Rule catalog: the rules and rule sets a style document may refer to."""

from mdlstyle.catalog.loader import RuleCatalog
from mdlstyle.catalog.models import RuleEntry

__all__ = [
    "RuleCatalog",
    "RuleEntry",
]
