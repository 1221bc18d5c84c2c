"""Merging of a chain of versions' metadata into a single metadata.
"""

from .error import IncompleteVersionError
from .model import RawDescriptor, MergedDescriptor

from typing import List


# Scalar fields overridden by more specific versions.
_OVERRIDE_FIELDS = (
    "type", "time", "release_time", "main_class", "assets", "asset_index",
    "downloads", "minecraft_arguments", "logging", "java_version", "client_version",
)


def merge(chain: List[RawDescriptor], *, check: bool = True) -> MergedDescriptor:
    """Merge a chain of versions, starting with the most specific version and ending
    with the root one, as returned by `resolve_chain`.

    The chain is walked from the root, so each value defined by a version overrides
    the one of its parents, the downloads are also replaced and not merged. The minimum
    launcher version is the greatest one. Libraries and arguments are concatenated, the
    root ones first, and duplicates are kept.

    :param check: Check that the merged metadata has all required values.
    :raises IncompleteVersionError: If checked and a required value is missing.
    """

    if not len(chain):
        raise ValueError("empty version chain")

    merged = MergedDescriptor(chain[0].id)

    for desc in reversed(chain):

        for field in _OVERRIDE_FIELDS:
            value = getattr(desc, field)
            if value is not None:
                setattr(merged, field, value)

        if desc.minimum_launcher_version is not None:
            merged.minimum_launcher_version = max(merged.minimum_launcher_version, desc.minimum_launcher_version)

        if desc.libraries is not None:
            merged.libraries.extend(desc.libraries)

        for field in ("game_arguments", "jvm_arguments"):
            args = getattr(desc, field)
            if args is not None:
                merged_args = getattr(merged, field)
                setattr(merged, field, args if merged_args is None else merged_args + args)

    if check:
        check_complete(merged)

    return merged


def check_complete(merged: MergedDescriptor) -> None:
    """Check that the merged metadata can be launched.

    :raises IncompleteVersionError: Giving the first missing value.
    """

    if not merged.main_class:
        raise IncompleteVersionError(merged.id, "mainClass")
    if merged.asset_index is None or merged.asset_index.is_default():
        raise IncompleteVersionError(merged.id, "assetIndex")
    if not merged.downloads:
        raise IncompleteVersionError(merged.id, "downloads")
