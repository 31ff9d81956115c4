"""
StubTap Common Utilities

Stub definition file parsing and environment configuration helpers.
"""

import json
import os
from pathlib import Path
from typing import List, Dict, Any, Optional

import yaml


YAML_SUFFIXES = {'.yaml', '.yml'}


def get_env_setting(name: str, default: Optional[str] = None) -> Optional[str]:
    """
    Read a StubTap setting from the environment.

    Args:
        name: Setting name without prefix (e.g. "PORT" reads STUBTAP_PORT)
        default: Value to return when the variable is unset or empty

    Returns:
        Environment value, or default
    """
    return os.environ.get(f"STUBTAP_{name.upper()}") or default


def safe_json_parse(json_string: Any, default: Any = None) -> Any:
    """
    Safely parse JSON string with error handling.

    Args:
        json_string: JSON string or bytes to parse
        default: Default value to return if parsing fails

    Returns:
        Parsed JSON object, or default if parsing fails

    Example:
        body = safe_json_parse(await request.body(), default={})
    """
    if not json_string:
        return default

    try:
        return json.loads(json_string)
    except (json.JSONDecodeError, TypeError, ValueError):
        return default


class StubFileParser:
    """
    Parser for stub definition files.

    Handles the formats stub definitions are written in:
    - JSON object: one stub definition
    - JSON list: several stub definitions
    - YAML (.yaml / .yml): same shapes as JSON

    Example:
        parser = StubFileParser("stubs/greeter/hello.json")
        for definition in parser.load():
            print(definition['service'], definition['method'])
    """

    def __init__(self, file_path: str):
        """
        Initialize stub file parser.

        Args:
            file_path: Path to stub definition file
        """
        self.file_path = Path(file_path)

    @property
    def is_yaml(self) -> bool:
        return self.file_path.suffix.lower() in YAML_SUFFIXES

    def load(self) -> List[Dict[str, Any]]:
        """
        Load stub definitions from the file.

        Returns:
            List of stub definition dictionaries

        Raises:
            FileNotFoundError: If the file doesn't exist
            OSError: If the file can't be read
            ValueError: If the content is not valid JSON/YAML or has an
                unexpected shape
        """
        with open(self.file_path, 'r', encoding='utf-8') as f:
            content = f.read()

        return self.parse(content)

    def parse(self, content: str) -> List[Dict[str, Any]]:
        """Parse file content into a list of definition dictionaries."""
        try:
            if self.is_yaml:
                data = yaml.safe_load(content)
            else:
                data = json.loads(content)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise ValueError(f"Invalid stub definition in {self.file_path}: {e}") from e

        if isinstance(data, dict):
            return [data]
        elif isinstance(data, list):
            invalid = [item for item in data if not isinstance(item, dict)]
            if invalid:
                raise ValueError(
                    f"Unexpected stub definition format in {self.file_path}. "
                    f"Expected a list of objects, found {type(invalid[0]).__name__}"
                )
            return data
        else:
            raise ValueError(
                f"Unexpected stub definition format in {self.file_path}. "
                f"Expected object or list, got {type(data).__name__}"
            )
