"""Shared loading and error conversion for metadata document parsers."""

import logging
import tomllib
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Type, TypeVar, Union

import yaml
from pydantic import BaseModel, ValidationError

from chipspec.errors import SchemaError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

TOML_SUFFIXES = (".toml",)
YAML_SUFFIXES = (".yml", ".yaml")


def format_loc(prefix: str, loc: Sequence[Union[str, int]]) -> str:
    """Render a Pydantic error location as ``device.gpio.instances[0].pin``."""
    path = prefix
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        elif path:
            path += f".{part}"
        else:
            path = str(part)
    return path or "<root>"


def validation_problems(e: ValidationError, prefix: str = "") -> List[Tuple[str, str]]:
    """Convert Pydantic validation errors to ``(field_path, message)`` pairs."""
    return [(format_loc(prefix, error["loc"]), error["msg"]) for error in e.errors()]


class DocumentParser:
    """
    Base class for document parsers.

    Handles file loading (TOML or YAML, chosen by suffix) and converts
    Pydantic validation errors into a single ``SchemaError`` that lists every
    offending field.
    """

    def __init__(self):
        self._current_file: Optional[Path] = None

    def load_tree(self, file_path: Union[str, Path]) -> Any:
        """
        Read a file into a plain structured tree.

        Raises:
            SchemaError: If the file is missing or not valid TOML/YAML
        """
        file_path = Path(file_path).resolve()
        self._current_file = file_path

        if not file_path.exists():
            raise SchemaError(f"File not found: {file_path}")

        logger.debug("Loading %s", file_path)

        if file_path.suffix in TOML_SUFFIXES:
            try:
                with open(file_path, "rb") as f:
                    return tomllib.load(f)
            except tomllib.TOMLDecodeError as e:
                raise SchemaError(f"TOML syntax error: {e}", file_path) from e

        if file_path.suffix not in YAML_SUFFIXES:
            raise SchemaError(f"Unsupported document type '{file_path.suffix}'", file_path)

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                return yaml.safe_load(f)
        except yaml.YAMLError as e:
            line = getattr(e, "problem_mark", None)
            line_num = line.line + 1 if line else None
            raise SchemaError(f"YAML syntax error: {e}", file_path, line_num) from e

    @staticmethod
    def _raise_problems(
        problems: List[Tuple[str, str]], file_path: Optional[Path]
    ) -> None:
        if not problems:
            return
        lines = "\n  ".join(f"{path}: {msg}" for path, msg in problems)
        raise SchemaError(
            f"Validation failed:\n  {lines}", file_path, field_path=problems[0][0]
        )

    @staticmethod
    def _validate(
        model_cls: Type[ModelT],
        data: Dict[str, Any],
        prefix: str,
        problems: List[Tuple[str, str]],
    ) -> Optional[ModelT]:
        """Validate ``data``; on failure record the problems and return None."""
        try:
            return model_cls.model_validate(data)
        except ValidationError as e:
            problems.extend(validation_problems(e, prefix))
            return None

