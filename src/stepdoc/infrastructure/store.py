"""DocumentStore — read and write document snapshots on disk.

The format follows the file suffix: ``.json`` (default) or
``.yaml``/``.yml`` via a round-trip ruamel.yaml parser. A missing file
loads as an empty document so ``stepdoc`` works in a fresh directory.
"""

from __future__ import annotations

import json
import logging
from io import StringIO
from pathlib import Path
from typing import Any

from pydantic import ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from stepdoc.domain.document import Document
from stepdoc.domain.errors import StepdocError

logger = logging.getLogger(__name__)

YAML_SUFFIXES = frozenset({".yaml", ".yml"})


class StoreError(StepdocError):
    """A snapshot file could not be read or does not hold a valid document."""

    code = "STORE_ERROR"


def _new_yaml() -> YAML:
    """Fresh YAML instance per call; ruamel's emitter state is not reusable after errors."""
    y = YAML()
    y.default_flow_style = False
    return y


class DocumentStore:
    """File-backed snapshot store for a single document."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    @property
    def is_yaml(self) -> bool:
        return self._path.suffix.lower() in YAML_SUFFIXES

    def exists(self) -> bool:
        return self._path.is_file()

    def load(self) -> Document:
        """Read the snapshot, or return an empty document if the file is missing.

        Raises:
            StoreError: If the file cannot be parsed or breaks document invariants.
        """
        if not self._path.is_file():
            logger.debug("No snapshot at %s; starting empty", self._path)
            return Document()

        raw = self._path.read_text(encoding="utf-8")
        if not raw.strip():
            return Document()
        try:
            data = self._decode(raw)
            return Document.from_snapshot(data)
        except (json.JSONDecodeError, YAMLError) as exc:
            msg = f"Cannot parse {self._path}: {exc}"
            raise StoreError(msg) from exc
        except (ValidationError, ValueError, TypeError, AttributeError) as exc:
            msg = f"Invalid document in {self._path}: {exc}"
            raise StoreError(msg) from exc

    def save(self, snapshot: dict[str, Any] | Document) -> Path:
        """Write *snapshot* (or a document) to disk, creating parent dirs."""
        if isinstance(snapshot, Document):
            snapshot = snapshot.to_snapshot()
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(self._encode(snapshot), encoding="utf-8")
        logger.debug("Saved snapshot to %s", self._path)
        return self._path

    def _decode(self, raw: str) -> Any:
        if self.is_yaml:
            return _to_plain(_new_yaml().load(raw))
        return json.loads(raw)

    def _encode(self, snapshot: dict[str, Any]) -> str:
        if self.is_yaml:
            buf = StringIO()
            _new_yaml().dump(snapshot, buf)
            return buf.getvalue()
        return json.dumps(snapshot, indent=2, ensure_ascii=False) + "\n"


def _to_plain(value: Any) -> Any:
    """Convert ruamel's CommentedMap/CommentedSeq into plain dicts and lists."""
    if isinstance(value, dict):
        return {str(k): _to_plain(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_to_plain(v) for v in value]
    return value
