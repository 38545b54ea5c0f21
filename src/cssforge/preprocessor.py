"""Flattens nested style bodies into plain CSS rules."""
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple, Union

from cssforge.exceptions import StyleSyntaxError

# A plugin receives each flattened rule and the source map comment of the body
# being compiled. It returns a replacement rule, None to keep the rule, or ""
# to drop it.
Plugin = Callable[[str, str], Optional[str]]

# At-rules whose block wraps the rules produced inside it.
CONDITIONAL_AT_RULES = ("@media", "@supports", "@document", "@container", "@layer")


@dataclass
class Declaration:
    text: str


@dataclass
class Statement:
    text: str


@dataclass
class Block:
    prelude: str
    children: List["Node"] = field(default_factory=list)


Node = Union[Declaration, Statement, Block]


def _collapse(text: str) -> str:
    return " ".join(text.split())


def split_top_level(text: str, separator: str = ",") -> List[str]:
    """Split on ``separator`` outside of parentheses, brackets and quotes."""
    parts = []
    depth = 0
    quote = None
    start = 0
    for i, char in enumerate(text):
        if quote:
            if char == quote and text[i - 1] != "\\":
                quote = None
        elif char in "\"'":
            quote = char
        elif char in "([":
            depth += 1
        elif char in ")]":
            depth = max(depth - 1, 0)
        elif char == separator and depth == 0:
            parts.append(text[start:i])
            start = i + 1
    parts.append(text[start:])
    return [part.strip() for part in parts if part.strip()]


def join_selectors(parents: Sequence[str], prelude: str) -> List[str]:
    """Resolve a nested selector list against its parents.

    ``&`` is replaced with the parent selector, a leading ``:`` attaches the
    pseudo selector to the parent, anything else becomes a descendant.
    """
    children = [_collapse(child) for child in split_top_level(prelude)]
    if not parents:
        return [child.replace("&", "").strip() if "&" in child else child for child in children]

    joined = []
    for parent in parents:
        for child in children:
            if "&" in child:
                joined.append(child.replace("&", parent))
            elif child.startswith(":"):
                joined.append(f"{parent}{child}")
            else:
                joined.append(f"{parent} {child}")
    return joined


class Preprocessor:
    """Expands nested selectors and at-rules into flat CSS rules."""

    def compile(
        self,
        selector: str,
        body: str,
        plugins: Sequence[Plugin] = (),
        source_map: str = "",
    ) -> List[str]:
        """Compile ``body`` scoped under ``selector``.

        Every produced rule runs through ``plugins`` in order before being
        returned.
        """
        nodes = self.parse(body, selector=selector)
        parents = [_collapse(selector)] if selector.strip() else []

        rules = []
        for rule in self._flatten(nodes, parents, []):
            for plugin in plugins:
                result = plugin(rule, source_map)
                if result is None:
                    continue
                rule = result
                if not rule:
                    break
            if rule:
                rules.append(rule)
        return rules

    def parse(self, text: str, selector: str = "") -> List[Node]:
        nodes, _ = self._parse_block(text, 0, 0, selector)
        return nodes

    def _parse_block(self, text: str, pos: int, depth: int, selector: str) -> Tuple[List[Node], int]:
        nodes: List[Node] = []
        buffer: List[str] = []
        quote = None
        parens = 0
        i = pos

        while i < len(text):
            char = text[i]

            if quote:
                buffer.append(char)
                if char == "\\" and i + 1 < len(text):
                    buffer.append(text[i + 1])
                    i += 2
                    continue
                if char == quote:
                    quote = None
                i += 1
                continue

            if char == "/" and text.startswith("*", i + 1):
                end = text.find("*/", i + 2)
                if end == -1:
                    raise StyleSyntaxError("Unterminated comment", selector=selector, position=i)
                i = end + 2
                continue

            if char in "\"'":
                quote = char
            elif char == "(":
                parens += 1
            elif char == ")":
                parens = max(parens - 1, 0)
            elif parens == 0:
                if char == ";":
                    self._emit(buffer, nodes)
                    buffer = []
                    i += 1
                    continue
                if char == "{":
                    prelude = _collapse("".join(buffer))
                    buffer = []
                    children, i = self._parse_block(text, i + 1, depth + 1, selector)
                    nodes.append(Block(prelude, children))
                    continue
                if char == "}":
                    if depth == 0:
                        raise StyleSyntaxError("Unexpected '}'", selector=selector, position=i)
                    self._emit(buffer, nodes)
                    return nodes, i + 1

            buffer.append(char)
            i += 1

        if depth > 0:
            raise StyleSyntaxError("Unclosed block", selector=selector, position=i)
        self._emit(buffer, nodes)
        return nodes, i

    def _emit(self, buffer: List[str], nodes: List[Node]) -> None:
        text = "".join(buffer).strip()
        if not text:
            return
        if text.startswith("@"):
            nodes.append(Statement(_collapse(text)))
            return
        name, sep, value = text.partition(":")
        name = _collapse(name)
        value = _collapse(value)
        if not sep or not name or not value:
            return
        nodes.append(Declaration(f"{name}:{value};"))

    def _flatten(self, nodes: List[Node], selectors: List[str], wrappers: List[str]) -> List[str]:
        own = "".join(node.text for node in nodes if isinstance(node, Declaration))
        rules = []
        if own and selectors:
            rules.append(self._wrap(f"{','.join(selectors)}{{{own}}}", wrappers))

        for node in nodes:
            if isinstance(node, Statement):
                if not selectors and not wrappers:
                    rules.append(f"{node.text};")
            elif isinstance(node, Block):
                rules.extend(self._flatten_block(node, selectors, wrappers))
        return rules

    def _flatten_block(self, block: Block, selectors: List[str], wrappers: List[str]) -> List[str]:
        prelude = block.prelude
        if not prelude.startswith("@"):
            return self._flatten(block.children, join_selectors(selectors, prelude), wrappers)

        name = prelude.split(" ", 1)[0].split("(", 1)[0].lower()
        if name in CONDITIONAL_AT_RULES:
            return self._flatten(block.children, selectors, wrappers + [prelude])

        if name.endswith("keyframes"):
            frames = "".join(
                f"{frame.prelude}{{{self._declarations(frame.children)}}}"
                for frame in block.children
                if isinstance(frame, Block)
            )
            return [self._wrap(f"{prelude}{{{frames}}}", wrappers)]

        # @font-face, @page, @counter-style and other declaration blocks
        declarations = self._declarations(block.children)
        if not declarations:
            return []
        return [self._wrap(f"{prelude}{{{declarations}}}", wrappers)]

    @staticmethod
    def _declarations(nodes: List[Node]) -> str:
        return "".join(node.text for node in nodes if isinstance(node, Declaration))

    @staticmethod
    def _wrap(rule: str, wrappers: List[str]) -> str:
        for wrapper in reversed(wrappers):
            rule = f"{wrapper}{{{rule}}}"
        return rule
