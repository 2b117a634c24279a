"""
User overrides of option values.

Overrides come from environment-style variables named
``<CRATE>_CONFIG_<OPTION>`` (uppercase, ``-`` replaced by ``_``). Raw
strings are converted to the option's value type here; whether the value
is acceptable is decided later by the option's constraints.
"""

import logging
from typing import Any, Dict, Mapping, Optional

from chipspec.errors import DiagnosticKind, Diagnostics
from chipspec.utils import enum_value, parse_int

from .option import ConfigDocument, ValueType

logger = logging.getLogger(__name__)


def env_prefix(crate: str) -> str:
    return f"{crate}_CONFIG_".upper().replace("-", "_")


def parse_override(raw: Any, value_type: ValueType) -> Any:
    """
    Convert a raw override string to a typed value.

    Raises:
        ValueError: If the text is not a valid value of ``value_type``
    """
    text = str(raw).strip()
    if value_type == ValueType.BOOL:
        lowered = text.lower()
        if lowered in ("true", "false"):
            return lowered == "true"
        raise ValueError(f"'{raw}' is not a boolean (expected true or false)")
    if value_type == ValueType.INTEGER:
        value = parse_int(text)
        if not isinstance(value, int):
            raise ValueError(f"'{raw}' is not an integer")
        return value
    if len(text) >= 2 and text[0] == text[-1] == '"':
        return text[1:-1]
    return text


def collect_overrides(
    document: ConfigDocument,
    environ: Mapping[str, str],
    diagnostics: Optional[Diagnostics] = None,
) -> Dict[str, Any]:
    """
    Pick the overrides that apply to ``document`` out of ``environ``.

    Unparseable values and variables carrying the crate prefix that match no
    option are recorded in ``diagnostics`` and skipped.

    Returns:
        Mapping of option name to typed override value
    """
    if not document.crate:
        return {}

    prefix = env_prefix(document.crate)
    by_var = {option.env_var(document.crate): option for option in document.options}
    overrides: Dict[str, Any] = {}

    for var in sorted(environ):
        if not var.startswith(prefix):
            continue
        option = by_var.get(var)
        if option is None:
            if diagnostics is not None:
                diagnostics.add(
                    DiagnosticKind.REFERENCE,
                    document.crate,
                    var,
                    "Override does not match any option",
                    value=environ[var],
                    expected="one of " + ", ".join(sorted(by_var)),
                )
            continue
        try:
            overrides[option.name] = parse_override(environ[var], option.value_type)
        except ValueError as e:
            if diagnostics is not None:
                diagnostics.add(
                    DiagnosticKind.CONSTRAINT,
                    option.name,
                    var,
                    str(e),
                    value=environ[var],
                    expected=f"{enum_value(option.value_type)} value",
                )
            continue
        logger.info("Option '%s' overridden by %s", option.name, var)

    return overrides
