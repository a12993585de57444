"""Tests for prompt template, JSON schema and response loading."""

from pathlib import Path

import pytest

from finscan.providers.exceptions import ProviderError
from finscan.providers.prompt_loader import (
    load_json_schema,
    load_prompt_template,
    parse_json_object,
)

_EXTRACTION_PROMPTS = Path(__file__).parents[2] / "finscan" / "extraction" / "prompts"
_SCORING_PROMPTS = Path(__file__).parents[2] / "finscan" / "scoring" / "prompts"


class TestLoadPromptTemplate:
    def test_loads_extraction_template(self) -> None:
        template = load_prompt_template(_EXTRACTION_PROMPTS / "extraction_prompt.txt")
        assert "{document_text}" in template
        assert "{content_type}" in template

    def test_loads_scoring_template(self) -> None:
        template = load_prompt_template(_SCORING_PROMPTS / "scoring_prompt.txt")
        assert "{transaction_json}" in template
        assert "{history_json}" in template

    def test_loads_custom_template(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom.txt"
        custom.write_text("Hello {document_text}")
        assert load_prompt_template(custom) == "Hello {document_text}"

    def test_missing_file_raises_error(self) -> None:
        with pytest.raises(ProviderError, match="Failed to load prompt"):
            load_prompt_template(Path("/nonexistent/file.txt"))


class TestLoadJsonSchema:
    def test_loads_extraction_schema(self) -> None:
        schema = load_json_schema(_EXTRACTION_PROMPTS / "extraction_schema.json")
        assert "merchant" in schema["properties"]  # type: ignore[operator]

    def test_loads_scoring_schema(self) -> None:
        schema = load_json_schema(_SCORING_PROMPTS / "scoring_schema.json")
        assert "riskScore" in schema["properties"]  # type: ignore[operator]

    def test_invalid_json_raises_error(self, tmp_path: Path) -> None:
        bad = tmp_path / "bad.json"
        bad.write_text("{not json")
        with pytest.raises(ProviderError, match="Failed to load JSON schema"):
            load_json_schema(bad)


class TestParseJsonObject:
    def test_parses_plain_object(self) -> None:
        assert parse_json_object('{"a": 1}') == {"a": 1}

    def test_strips_code_fences(self) -> None:
        raw = '```json\n{"merchant": "Acme Co"}\n```'
        assert parse_json_object(raw) == {"merchant": "Acme Co"}

    def test_invalid_json_raises(self) -> None:
        with pytest.raises(ProviderError, match="Invalid JSON response"):
            parse_json_object("definitely not json")

    def test_array_is_rejected(self) -> None:
        with pytest.raises(ProviderError, match="must be an object"):
            parse_json_object("[1, 2]")
