"""Loading of version metadata and resolution of the inheritance chain of versions.
"""

from json import JSONDecodeError
from pathlib import Path
import json

from .error import VersionNotFoundError, CyclicInheritanceError, TooMuchParentsError, \
    MalformedDescriptorError
from .model import RawDescriptor

from typing import Optional, Dict, List, Any, Union


class DescriptorLoader:
    """Base class for loaders of version metadata given their id.
    """

    def load(self, version: str) -> RawDescriptor:
        """Load the metadata of the given version.

        :raises VersionNotFoundError: If the version doesn't exist.
        :raises MalformedDescriptorError: If the metadata is invalid.
        """
        raise NotImplementedError


class DirectoryLoader(DescriptorLoader):
    """Loader of versions installed in a versions directory, the metadata of a version
    is stored in `<versions_dir>/<id>/<id>.json`.
    """

    def __init__(self, versions_dir: Path) -> None:
        self.versions_dir = versions_dir

    def metadata_file(self, version: str) -> Path:
        """This function returns the computed path of the metadata file.
        """
        return self.versions_dir / version / f"{version}.json"

    def load(self, version: str) -> RawDescriptor:

        metadata_file = self.metadata_file(version)

        try:
            with metadata_file.open("rt", encoding="utf-8") as fp:
                data = json.load(fp)
        except FileNotFoundError:
            raise VersionNotFoundError(version)
        except (JSONDecodeError, UnicodeDecodeError) as error:
            raise MalformedDescriptorError(f"metadata: invalid json: {error}", str(metadata_file))

        desc = RawDescriptor.from_json(data, metadata_file)
        if desc.id != version:
            raise MalformedDescriptorError(f"metadata: /id must be {version!r}", str(metadata_file))
        return desc


class DictLoader(DescriptorLoader):
    """Loader of versions from memory, values can be descriptors or decoded JSON.
    """

    def __init__(self, versions: Optional[Dict[str, Union[RawDescriptor, Any]]] = None) -> None:
        self.versions = versions or {}

    def add(self, desc: RawDescriptor) -> None:
        self.versions[desc.id] = desc

    def load(self, version: str) -> RawDescriptor:
        try:
            value = self.versions[version]
        except KeyError:
            raise VersionNotFoundError(version)
        desc = value if isinstance(value, RawDescriptor) else RawDescriptor.from_json(value)
        if desc.id != version:
            raise MalformedDescriptorError(f"metadata: /id must be {version!r}")
        return desc


def resolve_chain(leaf: RawDescriptor, loader: DescriptorLoader, *,
    max_parents: Optional[int] = None
) -> List[RawDescriptor]:
    """Walk the inheritance of a version up to the root version, loading each parent
    with the loader. The returned chain starts with the given leaf and ends with the
    root version.

    :param max_parents: If given, the maximum number of parents allowed.
    :raises VersionNotFoundError: If a parent can't be found.
    :raises CyclicInheritanceError: If a version inherits from a version of its chain.
    :raises TooMuchParentsError: If the chain has more parents than allowed.
    """

    chain = [leaf]
    visited = {leaf.id}

    while chain[-1].inherits_from is not None:

        parent_id = chain[-1].inherits_from
        if parent_id in visited:
            raise CyclicInheritanceError(parent_id, [desc.id for desc in chain])

        if max_parents is not None and len(chain) > max_parents:
            raise TooMuchParentsError([desc.id for desc in chain])

        chain.append(loader.load(parent_id))
        visited.add(parent_id)

    return chain


def load_chain(version: str, loader: DescriptorLoader, *,
    max_parents: Optional[int] = None
) -> List[RawDescriptor]:
    """Load a version and resolve its chain, see `resolve_chain`.
    """
    return resolve_chain(loader.load(version), loader, max_parents=max_parents)
