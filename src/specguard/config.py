"""Configuration resolution for the validation engine.

Engine options live on :class:`~specguard.models.ValidatorConfig`. This
module builds one from the precedence chain:

    1. Explicit keyword arguments to :func:`resolve_config`
    2. Environment variables (``SPECGUARD_FORMAT_CHECKING``,
       ``SPECGUARD_CHECK_SCHEMAS``, ``SPECGUARD_MERGE_PATH_PARAMETERS``)
    3. Model defaults

Boolean environment values accept ``1/0``, ``true/false``, ``yes/no`` and
``on/off`` in any case.
"""

from __future__ import annotations

import os
from typing import Optional

from specguard.exceptions import ConfigError
from specguard.models import ValidatorConfig

_ENV_PREFIX = "SPECGUARD_"

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


def _env_flag(name: str) -> Optional[bool]:
    """Read a boolean flag from ``SPECGUARD_<NAME>``.

    Returns:
        The parsed flag, or ``None`` when the variable is unset or empty.

    Raises:
        ConfigError: If the variable holds something that is not a boolean.
    """
    var_name = f"{_ENV_PREFIX}{name.upper()}"
    raw = os.environ.get(var_name, "").strip()
    if not raw:
        return None
    value = raw.lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigError(
        f"Environment variable '{var_name}' must be a boolean, got {raw!r}"
    )


def resolve_config(
    format_checking: Optional[bool] = None,
    check_schemas: Optional[bool] = None,
    merge_path_parameters: Optional[bool] = None,
) -> ValidatorConfig:
    """Resolve a :class:`~specguard.models.ValidatorConfig`.

    Each option is taken from its keyword argument when given, otherwise
    from the matching ``SPECGUARD_*`` environment variable, otherwise from
    the model default.

    Returns:
        The effective configuration.

    Raises:
        ConfigError: If an environment variable is set to a non-boolean value.
    """
    explicit = {
        "format_checking": format_checking,
        "check_schemas": check_schemas,
        "merge_path_parameters": merge_path_parameters,
    }

    values: dict[str, bool] = {}
    for name, value in explicit.items():
        if value is None:
            value = _env_flag(name)
        if value is not None:
            values[name] = value

    return ValidatorConfig(**values)
