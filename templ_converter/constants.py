"""Named constants: protocol vocabulary, tag lists and generation defaults."""

from __future__ import annotations

# htmx protocol attributes
HX_POST = "hx-post"
HX_TARGET = "hx-target"
HX_SWAP = "hx-swap"
HX_TRIGGER = "hx-trigger"
HX_VALS = "hx-vals"

SWAP_OUTER_HTML = "outerHTML"
CHANGE_TRIGGER = "keyup changed delay:500ms"

ENDPOINT_TEMPLATE = "/api/{component}/{action}?id={{id}}"
TARGET_TEMPLATE = "#{name}-{{id}}"
INSTANCE_ID_TEMPLATE = "{name}-{{id}}"
VALUE_PAYLOAD_TEMPLATE = '{{"value": {expr}}}'

SUBMIT_ACTION = "submit"
CLEANUP_ACTION = "cleanup"
EFFECT_ACTION_PREFIX = "effect"

INSTANCE_ID_PARAM = "id"

VOID_TAGS: frozenset[str] = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

ATTRIBUTE_RENAMES: dict[str, str] = {
    "className": "class",
    "htmlFor": "for",
}

FRAGMENT_OPEN = "<>"
FRAGMENT_CLOSE = "</>"

CONDITIONAL_CALL = "templ.KV"
FORMAT_CALL = "fmt.Sprintf"
FORMAT_SPECIFIER = "%v"

FALLBACK_COMPONENT_NAME = "Component"
DEFAULT_EXPORT_KEY = "default"
DEFAULT_NAMESPACE = "templates"
DEFAULT_INDENT_WIDTH = 4

# Effect classification
FETCH_INDICATORS: tuple[str, ...] = ("fetch(", "axios.")
SIDE_EFFECT_INDICATORS: tuple[str, ...] = (
    "document.",
    "window.",
    "localStorage",
    "sessionStorage",
)

# Persistence
STATE_TTL_HOURS = 24
REDIS_MODULE = "github.com/redis/go-redis/v9"
TEMPL_MODULE = "github.com/a-h/templ"
UUID_MODULE = "github.com/google/uuid"

# JSX wire format
JSX_FRAGMENT_TYPE = "Fragment"
JSX_TEXT_TYPE = "text"
JSX_EXPRESSION_TYPE = "expression"
JSX_SPREAD_TYPE = "spread"

# State type tags
TYPE_STRING = "string"
TYPE_NUMBER = "number"
TYPE_BOOLEAN = "boolean"
TYPE_ARRAY = "array"
TYPE_OBJECT = "object"
TYPE_ANY = "any"

JS_KEYWORDS: frozenset[str] = frozenset(
    {
        "if",
        "for",
        "while",
        "switch",
        "catch",
        "function",
        "return",
        "typeof",
        "new",
    }
)
