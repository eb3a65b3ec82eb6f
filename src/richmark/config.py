#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richmark/config.py
"""Configuration file discovery and loading.

Parser and renderer options can be set in a configuration file with one
table per component:

.. code-block:: toml

    [parser]
    parse_underline = true

    [renderer]
    bullet_symbol = "-"
    emphasis_symbol = "_"

Files are searched from the working directory up to the filesystem root, in
this order within each directory: ``.richmark.toml``, ``.richmark.yaml``,
``.richmark.yml``, ``.richmark.json`` and finally ``pyproject.toml`` when it
has a ``[tool.richmark]`` table.

Environment variables named ``RICHMARK_<SECTION>_<FIELD>`` override file
values, e.g. ``RICHMARK_RENDERER_BULLET_SYMBOL=-``. ``RICHMARK_CONFIG``
names a config file explicitly.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from pathlib import Path

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib  # type: ignore[import-not-found,unused-ignore]
from typing import Any, Dict, Mapping, Optional

import yaml

from richmark.constants import CONFIG_FILENAMES, CONFIG_SECTIONS, ENV_PREFIX
from richmark.exceptions import ValidationError
from richmark.options.base import CloneFrozenMixin
from richmark.options.markdown import MarkdownParserOptions, MarkdownRendererOptions

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = f"{ENV_PREFIX}CONFIG"

_SECTION_CLASSES: dict[str, type[CloneFrozenMixin]] = {
    "parser": MarkdownParserOptions,
    "renderer": MarkdownRendererOptions,
}

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _load_pyproject_section(pyproject_path: Path) -> Dict[str, Any]:
    """Load the ``[tool.richmark]`` table from pyproject.toml.

    Returns
    -------
    dict
        The table, or an empty dict if the file has none

    Raises
    ------
    ValidationError
        If pyproject.toml cannot be parsed or the table is not a table

    """
    try:
        with open(pyproject_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ValidationError(f"Invalid TOML in pyproject.toml {pyproject_path}: {e}", original_error=e) from e

    config = data.get("tool", {}).get("richmark", {})
    if not isinstance(config, dict):
        raise ValidationError(
            f"[tool.richmark] section in {pyproject_path} must be a table, got {type(config).__name__}",
            parameter_name="tool.richmark",
        )
    return config


def find_config_in_parents(start_dir: Optional[Path] = None) -> Optional[Path]:
    """Find a configuration file by searching parent directories.

    Parameters
    ----------
    start_dir : Path, optional
        Starting directory for search, defaults to current working directory

    Returns
    -------
    Path or None
        Path to first config file found, or None if not found

    """
    current = (start_dir or Path.cwd()).resolve()

    while True:
        for filename in CONFIG_FILENAMES:
            config_path = current / filename
            if not config_path.is_file():
                continue
            if filename != "pyproject.toml":
                return config_path
            try:
                if _load_pyproject_section(config_path):
                    return config_path
            except ValidationError:
                logger.debug(f"Skipping unreadable {config_path}")

        parent = current.parent
        if parent == current:
            break
        current = parent

    return None


def load_config_file(config_path: Path | str) -> Dict[str, Any]:
    """Load configuration from a TOML, YAML, JSON or pyproject.toml file.

    Parameters
    ----------
    config_path : Path or str
        Path to the configuration file

    Returns
    -------
    dict
        Configuration dictionary loaded from file

    Raises
    ------
    ValidationError
        If the file does not exist, cannot be parsed, or has an unsupported
        extension

    """
    config_path = Path(config_path)

    if not config_path.is_file():
        raise ValidationError(f"Configuration file does not exist: {config_path}", parameter_name="config_path")

    filename = config_path.name.lower()
    ext = config_path.suffix.lower()

    if filename == "pyproject.toml":
        config = _load_pyproject_section(config_path)
    elif ext == ".toml":
        config = _load_toml_config(config_path)
    elif ext in (".yaml", ".yml"):
        config = _load_yaml_config(config_path)
    elif ext == ".json":
        config = _load_json_config(config_path)
    else:
        raise ValidationError(
            f"Unsupported config file format: {ext}. Use .toml, .yaml or .json", parameter_name="config_path"
        )

    logger.debug(f"Loaded configuration from {config_path}")
    return config


def _load_toml_config(config_path: Path) -> Dict[str, Any]:
    try:
        with open(config_path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ValidationError(f"Invalid TOML in config file {config_path}: {e}", original_error=e) from e


def _load_json_config(config_path: Path) -> Dict[str, Any]:
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = json.load(f)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON in config file {config_path}: {e}", original_error=e) from e

    if not isinstance(config, dict):
        raise ValidationError(f"JSON config file must contain an object, got {type(config).__name__}")
    return config


def _load_yaml_config(config_path: Path) -> Dict[str, Any]:
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValidationError(f"Invalid YAML in config file {config_path}: {e}", original_error=e) from e

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ValidationError(f"YAML config file must contain a mapping, got {type(config).__name__}")
    return config


def merge_configs(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge two configuration dictionaries, ``override`` winning.

    Nested dictionaries are merged recursively, not replaced entirely.

    Examples
    --------
    >>> merge_configs({"renderer": {"bullet_symbol": "-"}}, {"renderer": {"emphasis_symbol": "_"}})
    {'renderer': {'bullet_symbol': '-', 'emphasis_symbol': '_'}}

    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = merge_configs(result[key], value)
        else:
            result[key] = value
    return result


def _coerce(value: str, target: Any, name: str) -> Any:
    """Convert an environment string to the type of ``target``."""
    if isinstance(target, bool):
        lowered = value.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        raise ValidationError(f"Invalid boolean for {name}: {value!r}", parameter_name=name, parameter_value=value)
    if isinstance(target, int):
        try:
            return int(value)
        except ValueError as e:
            raise ValidationError(
                f"Invalid integer for {name}: {value!r}", parameter_name=name, parameter_value=value, original_error=e
            ) from e
    return value


def env_overrides(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Collect ``RICHMARK_<SECTION>_<FIELD>`` overrides from the environment.

    Variables naming a section that does not exist are ignored; a known
    section with an unknown field is an error.

    Returns
    -------
    dict
        Overrides shaped like a configuration file

    Raises
    ------
    ValidationError
        If a variable names an unknown field or holds a value of the wrong type

    """
    environ = os.environ if environ is None else environ
    overrides: Dict[str, Any] = {}

    for key, value in environ.items():
        if not key.startswith(ENV_PREFIX) or key == CONFIG_ENV_VAR:
            continue
        section, _, field_name = key[len(ENV_PREFIX) :].lower().partition("_")
        if section not in CONFIG_SECTIONS or not field_name:
            continue

        defaults = _SECTION_CLASSES[section]()
        if field_name not in defaults.field_names():
            raise ValidationError(f"Unknown {section} option in environment: {key}", parameter_name=key)
        overrides.setdefault(section, {})[field_name] = _coerce(value, getattr(defaults, field_name), key)

    return overrides


def _build_section(section: str, values: Any) -> Any:
    options_class = _SECTION_CLASSES[section]
    if not isinstance(values, dict):
        raise ValidationError(f"[{section}] must be a table, got {type(values).__name__}", parameter_name=section)

    unknown = set(values) - set(options_class.field_names())
    if unknown:
        raise ValidationError(
            f"Unknown {section} option(s): {', '.join(sorted(unknown))}",
            parameter_name=section,
            parameter_value=sorted(unknown),
        )
    try:
        return options_class(**values)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid [{section}] configuration: {e}", parameter_name=section, original_error=e) from e


def options_from_config(config: Dict[str, Any]) -> tuple[MarkdownParserOptions, MarkdownRendererOptions]:
    """Build option objects from a configuration dictionary.

    Raises
    ------
    ValidationError
        If the configuration has unknown sections or keys, or invalid values

    """
    unknown_sections = set(config) - set(CONFIG_SECTIONS)
    if unknown_sections:
        raise ValidationError(
            f"Unknown configuration section(s): {', '.join(sorted(unknown_sections))}",
            parameter_value=sorted(unknown_sections),
        )
    parser_options = _build_section("parser", config.get("parser", {}))
    renderer_options = _build_section("renderer", config.get("renderer", {}))
    return parser_options, renderer_options


def load_options(
    path: Optional[Path | str] = None,
    start_dir: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> tuple[MarkdownParserOptions, MarkdownRendererOptions]:
    """Load parser and renderer options.

    Priority order (highest to lowest):

    1. ``RICHMARK_<SECTION>_<FIELD>`` environment variables
    2. Explicit config file ``path``, else the file named by ``RICHMARK_CONFIG``,
       else the first file discovered from ``start_dir`` upwards
    3. Option defaults

    Parameters
    ----------
    path : Path or str, optional
        Explicit configuration file
    start_dir : Path, optional
        Directory to start discovery from, defaults to the working directory
    environ : mapping, optional
        Environment to read, defaults to ``os.environ``

    Returns
    -------
    tuple of (MarkdownParserOptions, MarkdownRendererOptions)

    Raises
    ------
    ValidationError
        If a configuration source is unreadable or invalid

    """
    environ = os.environ if environ is None else environ

    config_path: Optional[Path | str] = path or environ.get(CONFIG_ENV_VAR) or find_config_in_parents(start_dir)
    config = load_config_file(config_path) if config_path else {}
    config = merge_configs(config, env_overrides(environ))
    return options_from_config(config)
