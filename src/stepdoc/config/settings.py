"""StepdocSettings — CLI flags, environment and ``stepdoc.toml`` merged.

Priority, highest first:

1. keyword arguments (the CLI flags Click collected);
2. ``STEPDOC_*`` environment variables, ``__`` for nested keys
   (``STEPDOC_EDITOR__DEFAULT_CODE_LANGUAGE=python``);
3. the ``stepdoc.toml`` in effect;
4. defaults baked into :mod:`stepdoc.config.models`.
"""

from __future__ import annotations

import threading
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from stepdoc.config.discovery import find_config
from stepdoc.config.models import EditorConfig, StorageConfig

# pydantic-settings builds sources from the class, so the TOML path for the
# settings object under construction is handed over per thread.
_pending = threading.local()


def _read_toml(path: Path | None) -> dict[str, Any]:
    if path is None or not path.is_file():
        return {}
    try:
        with path.open("rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise click.ClickException(f"Invalid TOML in {path}: {exc}") from exc


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Settings values read from one TOML file (sections map to fields)."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data = _read_toml(toml_path)

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._data.get(field_name), field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


class StepdocSettings(BaseSettings):
    """Everything a CLI invocation needs to know, resolved once.

    Attributes:
        root: Directory relative document paths resolve against: the
            directory holding ``stepdoc.toml``, or the CWD.
        config_path: The TOML file in effect, if any.
        document_file: ``--file`` override for ``[storage] path``.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "STEPDOC_",
        "env_nested_delimiter": "__",
    }

    root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None
    document_file: Path | None = None

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    editor: EditorConfig = Field(default_factory=EditorConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        toml = TomlSettingsSource(settings_cls, getattr(_pending, "toml_path", None))
        return (init_settings, env_settings, toml)

    @property
    def document_path(self) -> Path:
        """Absolute location of the document file."""
        path = self.document_file or Path(self.storage.path)
        return path if path.is_absolute() else self.root / path

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        root: Path | None = None,
        **cli_flags: Any,
    ) -> StepdocSettings:
        """Resolve the TOML file and root, then build the settings.

        An explicit *config_path* that does not exist is ignored rather
        than triggering discovery.
        """
        if config_path:
            explicit = Path(config_path)
            toml_path = explicit if explicit.is_file() else None
        else:
            toml_path = find_config(root)

        if root is None:
            root = toml_path.parent if toml_path else Path.cwd()

        _pending.toml_path = toml_path
        try:
            return cls(root=root, config_path=toml_path, **cli_flags)
        finally:
            _pending.toml_path = None
