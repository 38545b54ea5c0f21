"""In-memory style sheet that collects inserted CSS rules."""
import html
from typing import Iterable, List, Optional, Tuple

from cssforge.exceptions import SheetError

STYLE_ID_ATTRIBUTE = "data-cssforge"


class StyleSheet:
    """Collects flattened CSS rules in insertion order."""

    def __init__(self) -> None:
        self._rules: List[Tuple[str, str]] = []  # (rule, source map comment)
        self.injected = False

    def inject(self) -> None:
        """Create the backing storage. Must be called before ``insert``."""
        if self.injected:
            raise SheetError("StyleSheet already injected")
        self._rules = []
        self.injected = True

    def insert(self, rule: str, source_map: str = "") -> None:
        if not self.injected:
            raise SheetError("StyleSheet must be injected before inserting rules")
        self._rules.append((rule, source_map))

    def flush(self) -> None:
        """Discard every rule. ``inject`` has to be called again afterwards."""
        self._rules = []
        self.injected = False

    @property
    def rules(self) -> List[str]:
        return [rule for rule, _ in self._rules]

    def __len__(self) -> int:
        return len(self._rules)

    def css_text(self) -> str:
        """All rules joined, each followed by its source map comment if any."""
        return "".join(rule + source_map for rule, source_map in self._rules)

    def render(self, ids: Optional[Iterable[str]] = None, nonce: Optional[str] = None) -> str:
        """Render all collected rules as a single <style> block.

        ``ids`` are written to the ``data-cssforge`` attribute so a client can
        hydrate them.
        """
        id_list = list(ids or [])
        if not self._rules and not id_list:
            return ""

        attrs = f' {STYLE_ID_ATTRIBUTE}="{html.escape(" ".join(id_list))}"'
        if nonce:
            attrs += f' nonce="{html.escape(nonce)}"'
        # "</" inside a rule must not close the element; "<\/" means the same in CSS
        css_text = self.css_text().replace("</", "<\\/")
        return f"<style{attrs}>{css_text}</style>"
