"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, stepdoc.toml only contains
overrides. An empty (or missing) config file is valid.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class EditorConfig(BaseModel):
    """[editor] section."""

    model_config = {"frozen": True}

    default_group_title: str = "New group"
    default_code_language: str = "javascript"


class StorageConfig(BaseModel):
    """[storage] section."""

    model_config = {"frozen": True}

    path: str = "stepdoc.json"
    autosave: bool = True


class StepdocConfig(BaseModel):
    """Top-level stepdoc.toml model."""

    model_config = {"frozen": True}

    editor: EditorConfig = Field(default_factory=EditorConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
