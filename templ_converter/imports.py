"""Import resolution for the generated Go sources."""

from __future__ import annotations

import logging
import re

from . import constants
from .component import Component
from .go_types import go_type
from .handlers import parse_uses_json, parse_uses_strconv, state_go_type
from .jsx import expression_sources
from .options import ConversionOptions, PersistenceMode
from .persistence import get_persistence

logger = logging.getLogger(__name__)

_STRCONV_USAGE = (".toString()", ".toFixed(", "parseInt(", "parseFloat(")
_TIME_USAGE = ("new Date(", ".getTime(", ".getDate(")
_REGEXP_USAGE = re.compile(r"RegExp\(|\.match\(|\.test\(|\.replace\(")


def _is_standard_library(path: str) -> bool:
    return "." not in path.split("/", 1)[0]


def format_imports(paths: set[str]) -> str:
    """Go import block, standard library first, each group sorted."""
    if not paths:
        return ""
    standard = sorted(p for p in paths if _is_standard_library(p))
    external = sorted(p for p in paths if not _is_standard_library(p))
    lines = ["import ("]
    lines.extend(f'\t"{path}"' for path in standard)
    if standard and external:
        lines.append("")
    lines.extend(f'\t"{path}"' for path in external)
    lines.append(")")
    return "\n".join(lines)


class ImportResolver:
    """Inspects a resolved component to find the imports its sources need."""

    def template_imports(self, component: Component, options: ConversionOptions) -> set[str]:
        imports: set[str] = set(options.custom_imports)
        sources = expression_sources(component.jsx)
        code = "\n".join(sources)

        if any(go_type(entry.type, entry.initial_value) in ("int", "float64") for entry in component.state):
            imports.add("strconv")
        if any(marker in code for marker in _STRCONV_USAGE):
            imports.add("strconv")
        if "`" in code and "${" in code:
            imports.add("fmt")
        if any(marker in code for marker in _TIME_USAGE):
            imports.add("time")
        if _REGEXP_USAGE.search(code):
            imports.add("regexp")
        if options.persistence == PersistenceMode.EXTERNAL_KV or component.props:
            imports.add("encoding/json")
        logger.debug("Template imports for %s: %s", component.name, sorted(imports))
        return imports

    def controller_imports(self, component: Component, options: ConversionOptions) -> set[str]:
        imports: set[str] = {
            "errors",
            "net/http",
            constants.TEMPL_MODULE,
            constants.UUID_MODULE,
        }
        imports.update(options.custom_imports)
        imports.update(get_persistence(options.persistence).imports())
        field_types = [state_go_type(entry) for entry in component.state]
        if any(parse_uses_strconv(t) for t in field_types):
            imports.add("strconv")
        if component.props or any(parse_uses_json(t) for t in field_types):
            imports.add("encoding/json")
        return imports
