"""Load the base template and the ordered change requests.

Both loaders fail fast: the strategies assume a non-empty template and a
clean list of request strings.
"""

import json
from pathlib import Path

import yaml


def load_template(path: Path | str) -> str:
    """Read the base template document.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is empty
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Base template not found: {path}")
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        raise ValueError(f"Base template is empty: {path}")
    return text


def load_requests(path: Path | str) -> list[str]:
    """Read the ordered change requests.

    JSON files hold a list of strings. YAML files (.yaml/.yml) hold either
    a list of strings or a mapping with a ``requests`` list.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file cannot be parsed or has the wrong shape
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Change request file not found: {path}")

    raw = path.read_text(encoding="utf-8")
    try:
        if path.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(raw)
        else:
            data = json.loads(raw)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ValueError(f"Could not parse change requests in {path}: {e}") from e

    if isinstance(data, dict):
        data = data.get("requests")

    if not isinstance(data, list):
        raise ValueError(
            f"Change requests in {path} must be a list of strings "
            f"(or a mapping with a 'requests' list)"
        )

    for i, item in enumerate(data, 1):
        if not isinstance(item, str) or not item.strip():
            raise ValueError(f"Change request #{i} in {path} is not a non-empty string")

    return list(data)
