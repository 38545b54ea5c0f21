"""The style engine: registration, dedup and insertion of compiled rules."""
import logging
import re
import threading
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional

from cssforge.composition import RegisteredSplit, classnames, split_registered
from cssforge.config import EngineOptions, load_config, validate_options
from cssforge.hashing import hash_string
from cssforge.interpolation import StyleCompiler
from cssforge.preprocessor import Plugin, Preprocessor
from cssforge.sheet import StyleSheet
from cssforge.values import BindingContext, StyleToken

logger = logging.getLogger(__name__)

SOURCE_MAP_PATTERN = re.compile(r"/\*#\ssourceMappingURL=data:application/json;\S+\s+\*/")


class Engine:
    """Compiles styles and inserts each distinct rule body into a sheet once.

    The engine owns the registry (token -> CSS text) and the set of inserted
    hashes. Both only grow until ``flush`` clears them.

    A token is registered before its rules are inserted. If the preprocessor
    or the sheet raises, the token stays registered but its hash is not marked
    inserted, so the next call with the same styles retries the insertion.
    Rules forwarded to the sheet before the failure are kept.
    """

    def __init__(
        self,
        sheet: Optional[StyleSheet] = None,
        preprocessor: Optional[Preprocessor] = None,
        **options: Any,
    ) -> None:
        self.options: EngineOptions = validate_options(options)
        self.sheet = sheet if sheet is not None else StyleSheet()
        self.preprocessor = preprocessor if preprocessor is not None else Preprocessor()

        self._registered: Dict[str, str] = {}
        self._inserted: Dict[str, bool] = {}
        self._plugins: List[Plugin] = list(self.options.plugins)
        self._lock = threading.RLock()
        self.compiler = StyleCompiler(self._registered)

        if not getattr(self.sheet, "injected", False):
            self.sheet.inject()

    @classmethod
    def from_config(cls, path: Path | str | None = None, **overrides: Any) -> "Engine":
        """Create an engine from a cssforge.config.py file.

        Keyword arguments override values read from the file.
        """
        options = load_config(path)
        options.update(overrides)
        return cls(**options)

    def configure(self, **options: Any) -> None:
        """Replace engine options. Registered and inserted styles are kept."""
        merged = {name: getattr(self.options, name) for name in EngineOptions.model_fields}
        merged.update(options)
        with self._lock:
            self.options = validate_options(merged)
            self._plugins = list(self.options.plugins)

    @property
    def registered(self) -> Mapping[str, str]:
        return MappingProxyType(self._registered)

    @property
    def inserted(self) -> Mapping[str, bool]:
        return MappingProxyType(self._inserted)

    def inserted_ids(self) -> List[str]:
        return list(self._inserted)

    # Identity & dedup

    def register(self, styles: str, meta: Optional[Mapping[str, Any]] = None) -> StyleToken:
        """Register ``styles`` and return its token. Idempotent."""
        return self._register(hash_string(styles), styles, meta)

    def _register(self, hash_: str, styles: str, meta: Optional[Mapping[str, Any]]) -> StyleToken:
        label = (meta or {}).get("label")
        token = StyleToken(f"{self.options.key}-{hash_}-{label}" if label else f"{self.options.key}-{hash_}")
        with self._lock:
            if token not in self._registered:
                self._registered[token] = styles
                logger.debug("Registered %s", token)
        return token

    # Insertion

    def use_plugin(self, plugin: Plugin) -> None:
        """Add a preprocessor plugin. The sheet insertion hook always runs after it."""
        with self._lock:
            self._plugins.append(plugin)

    def _insert_rule(self, rule: str, source_map: str) -> None:
        self.sheet.insert(rule, source_map)

    def ensure_inserted(self, hash_: str, selector: str, body: str) -> None:
        """Run ``body`` through the preprocessor into the sheet unless ``hash_`` was seen."""
        with self._lock:
            if hash_ in self._inserted:
                return

            source_map = ""
            if self.options.source_maps:
                found = SOURCE_MAP_PATTERN.search(body)
                source_map = found.group(0) if found else ""

            chain = [*self._plugins, self._insert_rule]
            logger.debug("Inserting %s (selector %r)", hash_, selector)
            self.preprocessor.compile(selector, body, plugins=chain, source_map=source_map)
            self._inserted[hash_] = True

    # Public style entry points

    def css(self, *args: Any, context: Optional[BindingContext] = None) -> StyleToken:
        """Compile styles into a scoped class rule and return its class name."""
        assembled = self.compiler.assemble(*args, context=context)
        hash_ = hash_string(assembled.styles)
        token = self._register(hash_, assembled.styles, assembled.meta)
        self.ensure_inserted(hash_, f".{token}", assembled.styles)
        return token

    def keyframes(self, *args: Any, context: Optional[BindingContext] = None) -> str:
        """Compile keyframe steps into an ``@keyframes`` rule and return its name."""
        assembled = self.compiler.assemble(*args, context=context)
        hash_ = hash_string(assembled.styles)
        name = f"animation-{hash_}-{assembled.label}" if assembled.label else f"animation-{hash_}"
        self.ensure_inserted(hash_, "", f"@keyframes {name}{{{assembled.styles}}}")
        return name

    def inject_global(self, *args: Any, context: Optional[BindingContext] = None) -> None:
        """Insert unscoped rules."""
        assembled = self.compiler.assemble(*args, context=context)
        self.ensure_inserted(hash_string(assembled.styles), "", assembled.styles)

    def font_face(self, *args: Any, context: Optional[BindingContext] = None) -> None:
        """Insert an ``@font-face`` rule."""
        assembled = self.compiler.assemble(*args, context=context)
        self.ensure_inserted(hash_string(assembled.styles), "", f"@font-face{{{assembled.styles}}}")

    # Composition

    def split_registered(self, class_names: str) -> RegisteredSplit:
        return split_registered(class_names, self._registered)

    def get_registered_styles(self, registered_styles: List[str], class_names: str) -> str:
        """Append registered tokens of ``class_names`` to ``registered_styles``.

        Returns the remaining (unregistered) class names.
        """
        split = self.split_registered(class_names)
        registered_styles.extend(split.registered)
        return split.raw

    def merge(self, class_names: str, source_map: Optional[str] = None) -> str:
        """Collapse the registered tokens of ``class_names`` into one rule."""
        split = self.split_registered(class_names)
        if len(split.registered) < 2:
            return class_names
        args: List[Any] = [split.registered]
        if source_map:
            args.append(source_map)
        return split.raw + self.css(*args)

    def cx(self, *args: Any) -> str:
        return self.merge(classnames(*args))

    # Lifecycle

    def hydrate(self, ids: Iterable[str]) -> None:
        """Mark ids as inserted, e.g. rules already delivered by server rendering."""
        with self._lock:
            count = 0
            for id_ in ids:
                self._inserted[id_] = True
                count += 1
            logger.debug("Hydrated %d ids", count)

    def flush(self) -> None:
        """Reset the registry, inserted set and sheet."""
        with self._lock:
            self.sheet.flush()
            self._inserted.clear()
            self._registered.clear()
            self.compiler.clear_cache()
            self.sheet.inject()
            logger.debug("Flushed style engine")
