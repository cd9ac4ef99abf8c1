"""React component to templ + htmx converter package."""

from .api import convert, convert_json, convert_source, load_component  # noqa: F401
from .assembler import Converter  # noqa: F401
from .component import Component  # noqa: F401
from .errors import (  # noqa: F401
    ComponentLoadError,
    ConversionError,
    ExtractionError,
    ValidationError,
)
from .options import ConversionOptions, IndentStyle, PersistenceMode  # noqa: F401
from .result import ConversionResult  # noqa: F401
