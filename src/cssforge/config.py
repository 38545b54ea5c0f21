"""Configuration loader for cssforge."""
import importlib.util
import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from cssforge.exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAME = "cssforge.config.py"

# Uppercase config variable -> engine option
CONFIG_KEYS = {
    "KEY": "key",
    "NONCE": "nonce",
    "SOURCE_MAPS": "source_maps",
    "PLUGINS": "plugins",
}


class EngineOptions(BaseModel):
    """Options accepted by ``Engine``."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    # Prefix of generated class names: "<key>-<hash>"
    key: str = Field(default="css", pattern=r"^[a-zA-Z][a-zA-Z0-9_-]*$")
    nonce: Optional[str] = None
    source_maps: bool = True
    plugins: List[Callable[..., Any]] = Field(default_factory=list)


def validate_options(data: Dict[str, Any]) -> EngineOptions:
    """Validate engine options, raising ConfigError with per-field messages."""
    try:
        return EngineOptions.model_validate(data)
    except ValidationError as e:
        errors = {}
        for err in e.errors():
            field_name = ".".join(str(part) for part in err.get("loc", ()))
            errors[field_name] = err.get("msg", "Invalid value")
        summary = ", ".join(f"{name}: {msg}" for name, msg in errors.items())
        raise ConfigError(f"Invalid engine options ({summary})", errors) from e


def load_config(path: Path | str | None = None) -> Dict[str, Any]:
    """
    Load engine options from a python file.

    If path is provided, loads from there.
    Otherwise, looks for cssforge.config.py in the current working directory.

    Returns a dictionary of engine options mapped from the uppercase variables
    found in the config module.
    """
    if path is None:
        path = Path.cwd() / DEFAULT_CONFIG_FILENAME
    else:
        path = Path(path)

    if not path.exists():
        return {}

    try:
        spec = importlib.util.spec_from_file_location("cssforge_config", path)
        if spec is None or spec.loader is None:
            return {}

        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)
    except Exception as e:
        logger.warning("Failed to load config from %s: %s", path, e)
        return {}

    return {
        option: getattr(module, name)
        for name, option in CONFIG_KEYS.items()
        if hasattr(module, name)
    }
