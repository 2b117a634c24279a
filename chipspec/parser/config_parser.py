"""
Configuration option document parser.

Accepts either ``{crate: ..., options: [...]}`` or a bare list of options
and returns a ``ConfigDocument``. Every option is validated, and all
problems are reported together.
"""

import logging
from pathlib import Path
from typing import Any, List, Optional, Tuple, Union

from chipspec.config import ConfigDocument, ConfigOption
from chipspec.errors import SchemaError

from .base import DocumentParser

logger = logging.getLogger(__name__)


class ConfigParser(DocumentParser):
    """Parser for configuration option documents."""

    def parse_file(self, file_path: Union[str, Path]) -> ConfigDocument:
        """
        Parse a configuration YAML file.

        Raises:
            SchemaError: If loading or validation fails
        """
        tree = self.load_tree(file_path)
        return self.parse_data(tree, self._current_file)

    def parse_data(self, tree: Any, file_path: Optional[Path] = None) -> ConfigDocument:
        """Build a ``ConfigDocument`` from an already parsed tree."""
        crate = None
        if isinstance(tree, list):
            raw_options = tree
        elif isinstance(tree, dict):
            unknown = sorted(set(tree) - {"crate", "options"})
            if unknown:
                raise SchemaError(
                    f"Unknown document keys: {', '.join(unknown)}", file_path, field_path=unknown[0]
                )
            crate = tree.get("crate")
            raw_options = tree.get("options") or []
        else:
            raise SchemaError("Root element must be a list or a dictionary", file_path)

        if not isinstance(raw_options, list):
            raise SchemaError("options must be a list", file_path, field_path="options")

        problems: List[Tuple[str, str]] = []
        options = []
        for idx, raw in enumerate(raw_options):
            label = f"options[{idx}]"
            if isinstance(raw, dict) and raw.get("name"):
                label += f"({raw['name']})"
            option = self._validate(ConfigOption, raw, label, problems)
            if option is not None:
                options.append(option)

        document = self._validate(
            ConfigDocument, {"crate": crate, "options": options}, "", problems
        )
        self._raise_problems(problems, file_path)
        logger.info("Parsed %d option(s) for crate '%s'", len(document.options), crate)
        return document
