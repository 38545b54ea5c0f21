"""Resolution of interpolation values into CSS text."""
import weakref
from collections.abc import Mapping
from typing import Any, Dict, Optional

from cssforge.properties import format_number, hyphenate, process_value
from cssforge.values import Assembled, BindingContext, Style, StyleToken, Template


def to_text(value: Any) -> str:
    """Convert a resolved value to the text appended to a style body."""
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return format_number(value)
    return str(value)


class StyleCompiler:
    """Turns interpolation values into style text.

    ``registered`` is the engine's registry (token -> CSS text). It is read
    here to expand references to previously registered styles but never
    written.
    """

    def __init__(self, registered: Dict[str, str]) -> None:
        self.registered = registered
        self._cache: "weakref.WeakKeyDictionary[Style, str]" = weakref.WeakKeyDictionary()

    def clear_cache(self) -> None:
        self._cache.clear()

    def lookup(self, value: Any) -> Optional[str]:
        """Return the registered CSS text ``value`` refers to, if any."""
        if isinstance(value, (str, int, float)) and not isinstance(value, bool):
            return self.registered.get(value)
        return None

    def resolve(
        self,
        value: Any,
        selector_context: bool = False,
        context: Optional[BindingContext] = None,
    ) -> Any:
        """Resolve one interpolation value.

        Returns CSS text, or the value itself when it is a literal (or a token
        used as a selector).
        """
        match value:
            case None | bool():
                return ""
            case StyleToken():
                registered = self.registered.get(value)
                if registered is None or selector_context:
                    return str(value)
                return registered
            case str() | int() | float():
                registered = self.lookup(value)
                if registered is None or selector_context:
                    return value
                return registered
            case Style() | Mapping() | list() | tuple():
                return self.serialize(value, context)
            case _ if callable(value):
                if context is None:
                    result = value()
                else:
                    result = value(context.merged_props, context.context)
                return self.resolve(result, selector_context, context)
            case _:
                return value

    def serialize(self, obj: Any, context: Optional[BindingContext] = None) -> str:
        """Serialize a style mapping or sequence to CSS text.

        Text for ``Style`` handles is cached unless a binding context is in
        play, since function values may then produce different output.
        """
        cacheable = isinstance(obj, Style) and context is None
        if cacheable:
            cached = self._cache.get(obj)
            if cached is not None:
                return cached

        if isinstance(obj, (list, tuple)):
            text = "".join(to_text(self.resolve(item, False, context)) for item in obj)
        else:
            text = "".join(self._serialize_entry(key, value, context) for key, value in obj.items())

        if cacheable:
            self._cache[obj] = text
        return text

    def _serialize_entry(self, key: str, value: Any, context: Optional[BindingContext]) -> str:
        if callable(value) and not isinstance(value, (Style, Mapping, list, tuple)):
            if context is None:
                value = value()
            else:
                value = value(context.merged_props, context.context)

        if isinstance(value, (Style, Mapping, list, tuple)):
            return f"{key}{{{self.serialize(value, context)}}}"

        registered = self.lookup(value)
        if registered is not None:
            return f"{key}{{{registered}}}"

        return f"{hyphenate(key)}:{to_text(process_value(key, value))};"

    def assemble(self, first: Any = None, *interpolations: Any, context: Optional[BindingContext] = None) -> Assembled:
        """Combine template segments or values into one style string.

        A ``Template`` first argument switches to template mode, where the
        segments are interleaved with the interpolations. A mapping carrying a
        ``"meta"`` key is taken as metadata and produces no text.
        """
        segments: tuple = ()
        if isinstance(first, Template):
            segments = first
            styles = segments[0] if segments else ""
        else:
            styles = to_text(self.resolve(first, False, context))

        meta: Dict[str, Any] = {}
        for index, interpolation in enumerate(interpolations):
            if isinstance(interpolation, Mapping) and "meta" in interpolation:
                meta_value = interpolation["meta"]
                meta = dict(meta_value) if isinstance(meta_value, Mapping) else {}
            else:
                # Right after a "." the value names a class, not a body.
                selector_context = styles.endswith(".")
                styles += to_text(self.resolve(interpolation, selector_context, context))
            if index + 1 < len(segments):
                styles += segments[index + 1]

        return Assembled(styles=styles, meta=meta)
