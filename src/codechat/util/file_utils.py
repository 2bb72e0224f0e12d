import json
from pathlib import Path
from typing import Any, Union

import yaml


def from_json_or_yaml(filepath: Union[str, Path]) -> Any:
    """
    Load a JSON or YAML document, chosen by file extension.

    Args:
    filepath (str | Path): Path ending in .json, .yaml or .yml.

    Returns:
    The parsed document (an empty dict for an empty YAML file).
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    suffix = path.suffix.lower()
    text = path.read_text(encoding="utf-8")
    if suffix == ".json":
        return json.loads(text)
    if suffix in {".yaml", ".yml"}:
        loaded = yaml.safe_load(text)
        return {} if loaded is None else loaded
    raise ValueError(f"Unsupported file extension '{suffix}'; expected .json, .yaml or .yml")
