import json
from pathlib import Path

from finscan.providers.exceptions import ProviderError


def load_prompt_template(path: Path) -> str:
    """Load a prompt template with ``str.format`` placeholders.

    Raises:
        ProviderError: if the file cannot be read.
    """
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ProviderError(f"Failed to load prompt template: {exc}") from exc


def load_json_schema(path: Path) -> dict[str, object]:
    """Load a JSON schema file.

    Raises:
        ProviderError: if the file cannot be read or parsed.
    """
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ProviderError(f"Failed to load JSON schema: {exc}") from exc


def parse_json_object(raw: str) -> dict[str, object]:
    """Parse a model response into a JSON object, tolerating markdown code fences."""
    cleaned = raw.strip()
    if cleaned.startswith("```"):
        lines = cleaned.splitlines()
        if lines and lines[0].startswith("```"):
            lines = lines[1:]
        if lines and lines[-1].strip() == "```":
            lines = lines[:-1]
        cleaned = "\n".join(lines)

    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise ProviderError(f"Invalid JSON response: {exc}") from exc

    if not isinstance(parsed, dict):
        raise ProviderError("JSON response must be an object")
    return parsed
