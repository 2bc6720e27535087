from pathlib import Path

import yaml
from pydantic import ValidationError

from src.domain.entities import BlockType
from src.rules.models import Rules

DEFAULT_RULES_PATH = Path("rules.yaml")


def _strip_yaml_fence(content: str) -> str:
    """Return the first ```yaml fenced block if present, else the whole text."""
    yaml_lines: list[str] = []
    in_block = False
    found_block = False

    for line in content.splitlines():
        s_line = line.strip()
        if s_line.startswith("```yaml"):
            in_block = True
            found_block = True
            continue
        if in_block and s_line.startswith("```"):
            break
        if in_block:
            yaml_lines.append(line)

    return "\n".join(yaml_lines) if found_block else content


def load_rules(path: Path | str = DEFAULT_RULES_PATH) -> Rules:
    """
    Load and validate the rules file.
    Raises FileNotFoundError if file missing.
    Raises ValueError if the YAML or the schema is invalid.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Rules file not found at: {path}")

    with open(path) as f:
        content = f.read()

    try:
        data = yaml.safe_load(_strip_yaml_fence(content))
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML syntax in rules file: {e}") from e

    try:
        rules = Rules.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Rules validation failed:\n{e}") from e

    # The block set is closed: config may narrow it but never extend it
    unknown = [t for t in rules.blocks.allowed_types if BlockType.parse(t) is None]
    if unknown:
        raise ValueError(f"Rules validation failed: unknown block types {unknown}")

    return rules
