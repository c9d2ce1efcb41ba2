"""Data store for downloaded sources and computed envelopes.

Tiers, by how often they change:
  - reference/: WorldClim archives and GeoTIFFs, effectively static (long TTL)
  - occurrences/: GBIF occurrence pulls per species (days)
  - derived/: Envelope outputs, always recomputed

JSON files are wrapped in a ``{"meta": ..., "data": ...}`` envelope carrying
``valid_until``. Binary downloads keep their native format with a sidecar
``.meta.json`` holding the same metadata.
"""

from __future__ import annotations

import json
import re
from datetime import UTC, datetime
from pathlib import Path  # noqa: TC003 (used at runtime)
from typing import Any


def slugify(name: str) -> str:
    """File-safe form of a species name: "Vanessa cardui" -> "vanessa_cardui"."""
    slug = re.sub(r"[^a-z0-9]+", "_", name.strip().lower()).strip("_")
    if not slug:
        msg = f"Cannot build a file name from {name!r}"
        raise ValueError(msg)
    return slug


class DataStore:
    """Reads and writes cached files under a base directory."""

    def __init__(self, base_dir: Path) -> None:
        self.base = base_dir
        self.reference = base_dir / "reference"
        self.occurrences = base_dir / "occurrences"
        self.derived = base_dir / "derived"

    def occurrences_path(self, species: str) -> Path:
        return Path("occurrences") / f"{slugify(species)}.json"

    def envelope_path(self, species: str, mode: str) -> Path:
        return Path("derived") / f"{slugify(species)}_{mode}.json"

    def read(self, path: Path) -> Any:
        """Return the ``data`` payload of an enveloped JSON file, or None if missing."""
        full = self._resolve(path)
        if not full.exists():
            return None
        with full.open() as f:
            envelope: dict[str, Any] = json.load(f)
        return envelope.get("data", envelope)

    def write(
        self,
        path: Path,
        data: Any,
        source: str,
        valid_until: datetime | None = None,
        **params: Any,
    ) -> Path:
        """Write data wrapped in a metadata envelope.

        Args:
            path: Relative path under the base directory.
            data: Payload stored under the ``data`` key.
            source: Data source identifier (e.g. ``"gbif.org"``).
            valid_until: Expiry timestamp. None means never fresh.
            **params: Extra metadata (species, query parameters, ...).

        Returns:
            Absolute path of the written file.
        """
        full = self._resolve(path)
        full.parent.mkdir(parents=True, exist_ok=True)
        envelope = {"meta": self._meta(source, valid_until, params), "data": data}
        with full.open("w") as f:
            json.dump(envelope, f, indent=2)
        return full

    def mark_file(
        self,
        path: Path,
        source: str,
        valid_until: datetime | None = None,
        **params: Any,
    ) -> Path:
        """Write sidecar metadata for a binary file already placed in the store."""
        full = self._resolve(path)
        if not full.exists():
            msg = f"Cannot mark missing file: {full}"
            raise FileNotFoundError(msg)
        with self._sidecar(full).open("w") as f:
            json.dump({"meta": self._meta(source, valid_until, params)}, f, indent=2)
        return full

    def file_path(self, path: Path) -> Path:
        """Absolute location of ``path`` inside the store (may not exist yet)."""
        return self._resolve(path)

    def is_fresh(self, path: Path) -> bool:
        """True if the file exists and its ``valid_until`` has not passed."""
        full = self._resolve(path)
        if not full.exists():
            return False

        valid_until = self._read_meta(full).get("valid_until")
        if valid_until is None:
            return False

        expiry = datetime.fromisoformat(valid_until)
        if expiry.tzinfo is None:
            expiry = expiry.replace(tzinfo=UTC)
        return datetime.now(UTC) < expiry

    @staticmethod
    def _meta(source: str, valid_until: datetime | None, params: dict[str, Any]) -> dict[str, Any]:
        meta: dict[str, Any] = {
            "source": source,
            "fetched_at": datetime.now(UTC).isoformat(),
        }
        if valid_until is not None:
            meta["valid_until"] = valid_until.isoformat()
        meta.update(params)
        return meta

    @staticmethod
    def _sidecar(full: Path) -> Path:
        return full.with_suffix(full.suffix + ".meta.json")

    def _resolve(self, path: Path) -> Path:
        full = self.base / path if not path.is_absolute() else path
        try:
            full.resolve().relative_to(self.base.resolve())
        except ValueError:
            msg = f"Path escapes store base directory: {path}"
            raise ValueError(msg) from None
        return full

    def _read_meta(self, full: Path) -> dict[str, Any]:
        sidecar = self._sidecar(full)
        if sidecar.exists():
            with sidecar.open() as f:
                result: dict[str, Any] = json.load(f)
            return result.get("meta", {})

        if full.suffix == ".json":
            with full.open() as f:
                envelope: dict[str, Any] = json.load(f)
            return envelope.get("meta", {})

        return {}
