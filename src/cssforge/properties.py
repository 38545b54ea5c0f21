"""Property name and value normalization for style objects."""
import math
import re
from functools import lru_cache
from typing import Any

# Properties whose numeric values are written without a unit.
UNITLESS = frozenset(
    {
        "animationIterationCount",
        "borderImageOutset",
        "borderImageSlice",
        "borderImageWidth",
        "boxFlex",
        "boxFlexGroup",
        "boxOrdinalGroup",
        "columnCount",
        "columns",
        "flex",
        "flexGrow",
        "flexPositive",
        "flexShrink",
        "flexNegative",
        "flexOrder",
        "gridRow",
        "gridRowEnd",
        "gridRowSpan",
        "gridRowStart",
        "gridColumn",
        "gridColumnEnd",
        "gridColumnSpan",
        "gridColumnStart",
        "fontWeight",
        "lineClamp",
        "lineHeight",
        "opacity",
        "order",
        "orphans",
        "tabSize",
        "widows",
        "zIndex",
        "zoom",
        # SVG
        "fillOpacity",
        "floodOpacity",
        "stopOpacity",
        "strokeDasharray",
        "strokeDashoffset",
        "strokeMiterlimit",
        "strokeOpacity",
        "strokeWidth",
    }
)

_HYPHENATE_PATTERN = re.compile(r"[A-Z]|^ms")


@lru_cache(maxsize=None)
def hyphenate(name: str) -> str:
    """Convert a camelCase property name to its CSS form.

    ``fontSize`` -> ``font-size``, ``msTransition`` -> ``-ms-transition``.
    """
    return _HYPHENATE_PATTERN.sub(lambda m: "-" + m.group(0), name).lower()


def is_unitless(name: str) -> bool:
    if name in UNITLESS:
        return True
    return name in _UNITLESS_HYPHENATED


_UNITLESS_HYPHENATED = frozenset(hyphenate(name) for name in UNITLESS)


def format_number(value: int | float) -> str:
    """Render a number the way it reads in CSS (``12.0`` -> ``12``)."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def process_value(name: str, value: Any) -> Any:
    """Normalize a declaration value.

    ``None`` and booleans become empty text. Finite non-zero numbers get a
    ``px`` suffix unless the property is unitless. Anything else passes
    through unchanged.
    """
    if value is None or isinstance(value, bool):
        return ""
    if isinstance(value, (int, float)):
        if value != 0 and (isinstance(value, int) or math.isfinite(value)) and not is_unitless(name):
            return f"{format_number(value)}px"
        return format_number(value)
    return value
