"""Tests for configuration section models."""

import pytest
from pydantic import ValidationError

from stepdoc.config.models import EditorConfig, StepdocConfig, StorageConfig


class TestDefaults:
    def test_editor(self) -> None:
        cfg = EditorConfig()
        assert cfg.default_group_title == "New group"
        assert cfg.default_code_language == "javascript"

    def test_storage(self) -> None:
        cfg = StorageConfig()
        assert cfg.path == "stepdoc.json"
        assert cfg.autosave is True

    def test_top_level(self) -> None:
        cfg = StepdocConfig()
        assert cfg.editor == EditorConfig()
        assert cfg.storage == StorageConfig()


class TestValidation:
    def test_sparse_section(self) -> None:
        cfg = StepdocConfig.model_validate({"editor": {"default_code_language": "rust"}})
        assert cfg.editor.default_code_language == "rust"
        assert cfg.editor.default_group_title == "New group"

    def test_frozen(self) -> None:
        cfg = StorageConfig()
        with pytest.raises(ValidationError):
            cfg.autosave = False  # type: ignore[misc]

    def test_bad_type(self) -> None:
        with pytest.raises(ValidationError):
            StorageConfig.model_validate({"autosave": "sometimes"})
