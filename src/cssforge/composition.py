"""Class name composition helpers."""
from collections.abc import Mapping
from typing import Any, Iterable, Iterator, List, NamedTuple


class RegisteredSplit(NamedTuple):
    registered: List[str]
    raw: str


def _iter_class_names(args: Iterable[Any]) -> Iterator[str]:
    for arg in args:
        match arg:
            case None | bool():
                continue
            case str():
                if arg:
                    yield arg
            case int() | float():
                yield str(arg)
            case Mapping():
                yield from (str(key) for key, value in arg.items() if value)
            case list() | tuple():
                yield from _iter_class_names(arg)
            case _ if callable(arg):
                yield from _iter_class_names((arg(),))
            case _:
                yield str(arg)


def classnames(*args: Any) -> str:
    """Flatten strings, sequences, mappings and callables into a class string.

    >>> classnames("a", {"b": True, "c": False}, None, ["d", "e"])
    'a b d e'
    """
    return " ".join(_iter_class_names(args))


def split_registered(class_names: str, registered: Mapping) -> RegisteredSplit:
    """Partition a class string into registered tokens and raw class text.

    The raw text keeps a trailing space per class so a new token can be
    appended directly.
    """
    tokens = []
    raw = ""
    for class_name in class_names.split():
        if class_name in registered:
            tokens.append(class_name)
        else:
            raw += f"{class_name} "
    return RegisteredSplit(tokens, raw)
