"""Runtime CSS compilation with deduplicated, scoped class names.

The module level functions are bound to a process-wide default engine. Create
an ``Engine`` of your own to keep independent registries (e.g. per test).
"""

from cssforge.composition import classnames
from cssforge.engine import Engine
from cssforge.exceptions import ConfigError, CSSForgeError, SheetError, StyleSyntaxError
from cssforge.sheet import StyleSheet
from cssforge.values import BindingContext, Style, StyleToken, Template

default_engine = Engine()

sheet = default_engine.sheet
registered = default_engine.registered
inserted = default_engine.inserted

css = default_engine.css
keyframes = default_engine.keyframes
inject_global = default_engine.inject_global
font_face = default_engine.font_face
cx = default_engine.cx
merge = default_engine.merge
get_registered_styles = default_engine.get_registered_styles
hydrate = default_engine.hydrate
flush = default_engine.flush
use_plugin = default_engine.use_plugin
configure = default_engine.configure

__all__ = [
    "BindingContext",
    "ConfigError",
    "CSSForgeError",
    "Engine",
    "SheetError",
    "Style",
    "StyleSheet",
    "StyleSyntaxError",
    "StyleToken",
    "Template",
    "classnames",
    "configure",
    "css",
    "cx",
    "default_engine",
    "flush",
    "font_face",
    "get_registered_styles",
    "hydrate",
    "inject_global",
    "inserted",
    "keyframes",
    "merge",
    "registered",
    "sheet",
    "use_plugin",
]
