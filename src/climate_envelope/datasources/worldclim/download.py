"""One-time download and unpacking of WorldClim archives into the data store."""

from __future__ import annotations

import logging
import zipfile
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import TYPE_CHECKING

import requests

from climate_envelope.datasources.worldclim import client
from climate_envelope.errors import DataSourceUnavailable
from climate_envelope.services.http import download_session

if TYPE_CHECKING:
    from climate_envelope.store import DataStore

logger = logging.getLogger(__name__)

# Climate normals do not change; re-download only if the cache is wiped
ARCHIVE_TTL = timedelta(days=365)

CHUNK_SIZE = 1 << 20


def _download(url: str, dest: Path) -> None:
    dest.parent.mkdir(parents=True, exist_ok=True)
    partial = dest.with_suffix(dest.suffix + ".part")
    try:
        with download_session.get(url, stream=True) as resp:
            resp.raise_for_status()
            with partial.open("wb") as f:
                for chunk in resp.iter_content(chunk_size=CHUNK_SIZE):
                    f.write(chunk)
    except (requests.RequestException, OSError) as exc:
        partial.unlink(missing_ok=True)
        msg = f"Could not download {url}: {exc}"
        raise DataSourceUnavailable(msg) from exc
    partial.replace(dest)


def _extract(archive: Path, variable: str, resolution: str, out_dir: Path) -> list[Path]:
    wanted = [client.month_filename(variable, resolution, m) for m in range(1, 13)]
    try:
        with zipfile.ZipFile(archive) as zf:
            names = set(zf.namelist())
            absent = [w for w in wanted if w not in names]
            if absent:
                msg = f"{archive.name} is missing {', '.join(absent)}"
                raise DataSourceUnavailable(msg)
            for name in wanted:
                zf.extract(name, out_dir)
    except (zipfile.BadZipFile, OSError) as exc:
        msg = f"Could not unpack {archive}: {exc}"
        raise DataSourceUnavailable(msg) from exc
    return [out_dir / w for w in wanted]


def download_variable(
    variable: str,
    resolution: str,
    store: DataStore,
    *,
    force: bool = False,
) -> list[Path]:
    """Make the 12 monthly GeoTIFFs for a variable available locally.

    Downloads ``wc2.1_{resolution}_{variable}.zip`` into the store's
    reference tier unless a fresh copy is already there, then unpacks it.

    Args:
        variable: WorldClim variable (``prec``, ``tavg``, ``tmin``, ``tmax``).
        resolution: ``10m``, ``5m``, ``2.5m`` or ``30s``.
        store: Data store owning the cache.
        force: Re-download even if the cached archive is fresh.

    Returns:
        Paths of the January..December GeoTIFFs.

    Raises:
        DataSourceUnavailable: If the archive cannot be fetched or unpacked.
    """
    name = client.dataset_name(variable, resolution)
    archive_rel = Path("reference") / "worldclim" / f"{name}.zip"
    archive = store.file_path(archive_rel)
    out_dir = store.file_path(Path("reference") / "worldclim" / name)

    if force or not store.is_fresh(archive_rel):
        url = client.archive_url(variable, resolution)
        logger.info("Downloading %s", url)
        _download(url, archive)
        store.mark_file(
            archive_rel,
            source="worldclim.org",
            valid_until=datetime.now(UTC) + ARCHIVE_TTL,
            variable=variable,
            resolution=resolution,
        )
    else:
        logger.debug("Using cached %s", archive)

    tifs = [out_dir / client.month_filename(variable, resolution, m) for m in range(1, 13)]
    if force or not all(p.exists() for p in tifs):
        tifs = _extract(archive, variable, resolution, out_dir)
    return tifs
