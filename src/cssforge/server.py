"""Server rendering helpers: style tags out, hydration ids back in."""
from typing import TYPE_CHECKING, List, Optional

from lxml import html as lxml_html

from cssforge.sheet import STYLE_ID_ATTRIBUTE

if TYPE_CHECKING:
    from cssforge.engine import Engine


def render_style_tag(engine: "Engine", nonce: Optional[str] = None) -> str:
    """Render the engine's sheet as a <style> element listing its inserted ids."""
    return engine.sheet.render(ids=engine.inserted_ids(), nonce=nonce or engine.options.nonce)


def inject_styles(document: str, engine: "Engine", nonce: Optional[str] = None) -> str:
    """Insert the engine's <style> element into an HTML document."""
    styles = render_style_tag(engine, nonce=nonce)
    if not styles:
        return document
    if "</head>" in document:
        return document.replace("</head>", f"{styles}</head>", 1)
    # No head: prepend
    return f"{styles}{document}"


def hydration_ids(markup: str) -> List[str]:
    """Collect the style ids embedded in server-rendered markup.

    Reads the ``data-cssforge`` attribute of every <style> element, in document
    order, skipping duplicates.
    """
    if not markup.strip():
        return []

    # Parse as a document so <style> elements hoisted into <head> are kept
    root = lxml_html.document_fromstring(markup)
    ids: List[str] = []
    seen = set()
    for element in root.iter("style"):
        value = element.get(STYLE_ID_ATTRIBUTE)
        if not value:
            continue
        for id_ in value.split():
            if id_ not in seen:
                seen.add(id_)
                ids.append(id_)
    return ids
