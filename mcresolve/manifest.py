"""Mojang's version manifest, listing every official version with the URL of its
metadata, and a loader that installs official metadata on demand.
"""

from json import JSONDecodeError
from pathlib import Path
import json

from .error import VersionNotFoundError, MalformedDescriptorError
from .http import http_get_json, HttpError
from .chain import DirectoryLoader
from .model import RawDescriptor
from .util import calc_input_sha1

from typing import Optional, Dict, List, Tuple


VERSION_MANIFEST_URL = "https://piston-meta.mojang.com/mc/game/version_manifest_v2.json"

# Aliases of the latest versions, as given in the manifest's 'latest' object.
LATEST_ALIASES = ("release", "snapshot")


class VersionManifest:
    """The official version manifest, requested once and kept in memory. If a cache
    file is given, the manifest is only downloaded again if modified, and the cached
    copy is used when offline.
    """

    def __init__(self, cache_file: Optional[Path] = None) -> None:
        self.data: Optional[dict] = None
        self.cache_file = cache_file

    def _read_cache(self) -> Optional[dict]:
        if self.cache_file is None:
            return None
        try:
            with self.cache_file.open("rt", encoding="utf-8") as fp:
                data = json.load(fp)
        except (OSError, JSONDecodeError):
            return None
        return data if isinstance(data, dict) else None

    def _write_cache(self, data: dict) -> None:
        if self.cache_file is not None:
            self.cache_file.parent.mkdir(parents=True, exist_ok=True)
            with self.cache_file.open("wt", encoding="utf-8") as fp:
                json.dump(data, fp)

    def _ensure_data(self) -> dict:
        """Return the manifest's data, requesting it on first call.

        :raises HttpError: If the manifest can't be requested and no cache is usable.
        """

        if self.data is not None:
            return self.data

        cached = self._read_cache()
        headers = {}
        if cached is not None and "last_modified" in cached:
            headers["If-Modified-Since"] = cached["last_modified"]

        try:
            res = http_get_json(VERSION_MANIFEST_URL, headers=headers)
        except HttpError as error:
            # 304 is not modified, 0 is a network error.
            if cached is None or error.res.status not in (0, 304):
                raise
            self.data = cached
            return cached

        data = res.json()
        last_modified = res.headers.get("Last-Modified")
        if last_modified is not None:
            data["last_modified"] = last_modified

        self._write_cache(data)
        self.data = data
        return data

    def filter_latest(self, version: str) -> Tuple[str, bool]:
        """Replace the 'release' and 'snapshot' aliases by the id of the latest version
        of that kind, other ids are returned unchanged.

        :return: The version id and true if the given id was an alias.
        """
        if version not in LATEST_ALIASES:
            return version, False
        latest = self._ensure_data()["latest"].get(version)
        return (version, False) if latest is None else (latest, True)

    def get_version(self, version: str) -> Optional[Dict[str, str]]:
        """Find the manifest entry of a version, giving its 'url', 'sha1' and 'type'.
        Aliases are accepted.

        :raises HttpError: If the manifest can't be requested.
        """
        version, _alias = self.filter_latest(version)
        return next((entry for entry in self.all_versions() if entry["id"] == version), None)

    def all_versions(self) -> List[dict]:
        return self._ensure_data()["versions"]


class ManifestLoader(DirectoryLoader):
    """Loader of versions installed in a versions directory that fetches the official
    versions from the manifest if they are missing or outdated. Fetched metadata are
    written to the versions directory.
    """

    def __init__(self, versions_dir: Path, manifest: Optional[VersionManifest] = None) -> None:
        super().__init__(versions_dir)
        self.manifest = manifest or VersionManifest()

    def load(self, version: str) -> RawDescriptor:

        try:
            version, _alias = self.manifest.filter_latest(version)
            entry = self.manifest.get_version(version)
        except HttpError:
            # The manifest is optional, installed versions still resolve offline.
            entry = None

        try:
            if entry is None or self._check_sha1(version, entry.get("sha1")):
                return super().load(version)
        except VersionNotFoundError:
            if entry is None:
                raise

        assert entry is not None
        return self._fetch(version, entry)

    def _check_sha1(self, version: str, expected_sha1: Optional[str]) -> bool:
        if expected_sha1 is None:
            return True
        try:
            with self.metadata_file(version).open("rb") as fp:
                return calc_input_sha1(fp) == expected_sha1
        except FileNotFoundError:
            raise VersionNotFoundError(version)

    def _fetch(self, version: str, entry: dict) -> RawDescriptor:

        res = http_get_json(entry["url"])

        try:
            data = res.json()
        except JSONDecodeError as error:
            raise MalformedDescriptorError(f"metadata: invalid json: {error}", entry["url"])

        metadata_file = self.metadata_file(version)
        desc = RawDescriptor.from_json(data, metadata_file)

        # Raw data is written only once parsed.
        metadata_file.parent.mkdir(parents=True, exist_ok=True)
        with metadata_file.open("wb") as fp:
            fp.write(res.data)

        return desc
