"""
Configuration loading for polydoc.

Reads a JSON or YAML file (or a plain dict) and validates it into a
PolydocConfig. Building runtime objects from it is left to polydoc.wiring.
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional

from polydoc.core.logger import get_logger
from polydoc.models.config import PolydocConfig

logger = get_logger(__name__)


def load_config(
    config_path: Optional[str] = None,
    config_dict: Optional[Dict[str, Any]] = None,
) -> PolydocConfig:
    """
    Load and validate polydoc configuration.

    Can be called with either:
    - A config file path (JSON/YAML)
    - A config dictionary (programmatic)

    Args:
        config_path: Path to JSON/YAML configuration file
        config_dict: Direct configuration dictionary

    Returns:
        Validated PolydocConfig

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If neither config_path nor config_dict provided, or the format is unsupported
        pydantic.ValidationError: If the configuration is invalid

    Example:
        >>> from polydoc.config import load_config
        >>> cfg = load_config(config_dict={"index": {"default_index": "polystudent"}})
        >>> cfg.index.base_url
        'http://localhost:9200'
    """
    if config_dict is not None:
        logger.info("Using provided config dictionary")
        return PolydocConfig.model_validate(config_dict)

    if not config_path:
        raise ValueError("Either config_path or config_dict must be provided")

    config_file = Path(config_path)
    if not config_file.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_file, "r", encoding="utf-8") as f:
        if config_file.suffix == ".json":
            raw = json.load(f)
        elif config_file.suffix in (".yaml", ".yml"):
            try:
                import yaml
            except ImportError as exc:
                raise ImportError(
                    "PyYAML required for YAML configs. "
                    "Install with: pip install 'polydoc[yaml]'"
                ) from exc
            raw = yaml.safe_load(f)
        else:
            raise ValueError(
                f"Unsupported config format: {config_file.suffix}. "
                "Use .json or .yaml"
            )

    logger.info(f"Loaded config from {config_path}")
    return PolydocConfig.model_validate(raw or {})
