"""Value types accepted and returned by the style engine."""
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterator, Mapping, Optional


class StyleToken(str):
    """A class name returned by ``css()``.

    Interpolating a token marks it as a reference to a registered style, so it
    expands to the registered declarations (or stays a class name right after
    a ``.``).
    """

    __slots__ = ()

    def __repr__(self) -> str:
        return f"StyleToken({str.__repr__(self)})"


class Template(tuple):
    """Literal text segments of a style template.

    ``css(Template("color: ", ";"), color)`` interleaves the segments with the
    resolved interpolations, like a tagged template literal.
    """

    def __new__(cls, *segments: str) -> "Template":
        return super().__new__(cls, segments)

    def __repr__(self) -> str:
        return f"Template{tuple.__repr__(self)}"


class Style:
    """Immutable style mapping whose serialized text is cached per instance.

    Plain dicts are re-serialized on every use; wrap style objects that are
    reused across renders in ``Style`` to compile them once. Nested values
    must not be mutated after the first use.
    """

    __slots__ = ("_declarations", "__weakref__")

    def __init__(self, declarations: Optional[Mapping[str, Any]] = None, /, **kwargs: Any):
        merged: Dict[str, Any] = dict(declarations or {})
        merged.update(kwargs)
        object.__setattr__(self, "_declarations", MappingProxyType(merged))

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Style objects are immutable")

    @property
    def declarations(self) -> Mapping[str, Any]:
        return self._declarations

    def items(self):
        return self._declarations.items()

    def __iter__(self) -> Iterator[str]:
        return iter(self._declarations)

    def __len__(self) -> int:
        return len(self._declarations)

    def __repr__(self) -> str:
        return f"Style({dict(self._declarations)!r})"


@dataclass(frozen=True)
class BindingContext:
    """Arguments passed to function interpolations."""

    merged_props: Any = None
    context: Any = None


@dataclass
class Assembled:
    """Result of assembling a style: the CSS text and its metadata."""

    styles: str
    meta: Dict[str, Any] = field(default_factory=dict)

    @property
    def label(self) -> Optional[str]:
        return self.meta.get("label")
