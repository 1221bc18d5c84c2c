"""Normalization of library entries from version metadata.

Across the years, libraries have been given in four shapes: libraries with per-OS
native classifiers, plain artifacts with download information, the same artifacts
restricted by rules, and legacy entries that only give a maven specifier and maybe a
repository URL. Each entry is parsed into one of these shapes and then resolved to a
`ResolvedLibrary` for a given platform. Entries that can't be understood or are not
relevant for the platform are silently skipped.
"""

from .rule import Rule, parse_rules, evaluate
from .model import Download, ResolvedLibrary
from .util import LibrarySpecifier
from .probe import PlatformInfo

from typing import Optional, Dict, List, Any, Callable, Union


# Default repository of legacy libraries without explicit URL, they are historically
# all provided by Forge installers.
LEGACY_MAVEN_URL = "http://files.minecraftforge.net/maven/"


class LibraryArtifact(Download):
    """Download information of a library file, with its path relative to the libraries
    directory, if known.
    """

    __slots__ = "path",

    def __init__(self, url: str, path: Optional[str] = None, size: Optional[int] = None, sha1: Optional[str] = None) -> None:
        super().__init__(url, size, sha1)
        self.path = path

    @classmethod
    def from_json(cls, value: Any, path: str) -> "LibraryArtifact":

        dl = Download.from_json(value, path)

        artifact_path = value.get("path")
        if artifact_path is not None and not isinstance(artifact_path, str):
            raise ValueError(f"{path}/path must be a string")

        return cls(dl.url, artifact_path, dl.size, dl.sha1)


class ClassifiedLibrary:
    """Library of native classifiers, the 'natives' mapping gives the classifier to use
    for each OS, the classifier may contain '${arch}' to be replaced by the pointer width.
    """

    __slots__ = "name", "classifiers", "natives", "extract_excludes", "rules"

    def __init__(self, name: Optional[str], classifiers: Dict[str, LibraryArtifact], natives: Dict[str, str],
        extract_excludes: Optional[List[str]] = None,
        rules: Optional[List[Rule]] = None
    ) -> None:
        self.name = name
        self.classifiers = classifiers
        self.natives = natives
        self.extract_excludes = extract_excludes or []
        self.rules = rules or []


class PlainLibrary:
    """Library with a single artifact and no condition.
    """

    __slots__ = "name", "artifact"

    def __init__(self, name: Optional[str], artifact: LibraryArtifact) -> None:
        self.name = name
        self.artifact = artifact


class PlatformGatedLibrary:
    """Library with a single artifact, only included if its rules allow.
    """

    __slots__ = "name", "artifact", "rules"

    def __init__(self, name: Optional[str], artifact: LibraryArtifact, rules: List[Rule]) -> None:
        self.name = name
        self.artifact = artifact
        self.rules = rules


class LegacyMavenLibrary:
    """Library only given by its maven specifier, the file is downloaded from the given
    repository or the default legacy one. Some of them also give natives mapping.
    """

    __slots__ = "name", "url", "natives", "rules"

    def __init__(self, name: str, url: Optional[str] = None,
        natives: Optional[Dict[str, str]] = None,
        rules: Optional[List[Rule]] = None
    ) -> None:
        self.name = name
        self.url = url
        self.natives = natives
        self.rules = rules or []


RawLibrary = Union[ClassifiedLibrary, PlainLibrary, PlatformGatedLibrary, LegacyMavenLibrary]


def parse_library(library: Any, path: str = "library") -> List[RawLibrary]:
    """Parse a library entry of version metadata into its typed shapes. Shapes are
    tried in order: classified, plain, platform gated and finally legacy. An entry
    giving both native classifiers and a regular artifact is parsed into two shapes.

    :raises ValueError: If the entry can't be parsed into any shape.
    """

    if not isinstance(library, dict):
        raise ValueError(f"{path} must be an object")

    name = library.get("name")
    if name is not None and not isinstance(name, str):
        raise ValueError(f"{path}/name must be a string")

    rules = None
    if library.get("rules") is not None:
        rules = parse_rules(library["rules"], f"{path}/rules")

    downloads = library.get("downloads")
    if downloads is not None and not isinstance(downloads, dict):
        raise ValueError(f"{path}/downloads must be an object")

    natives = library.get("natives")
    if natives is not None:
        if not isinstance(natives, dict) or not all(isinstance(v, str) for v in natives.values()):
            raise ValueError(f"{path}/natives must be an object of strings")

    result: List[RawLibrary] = []

    classifiers = None if downloads is None else downloads.get("classifiers")
    if natives is not None and classifiers is not None:

        if not isinstance(classifiers, dict):
            raise ValueError(f"{path}/downloads/classifiers must be an object")

        # Unused classifiers are not required to be valid.
        parsed_classifiers = {}
        for classifier, classifier_dl in classifiers.items():
            try:
                parsed_classifiers[classifier] = LibraryArtifact.from_json(classifier_dl, f"{path}/downloads/classifiers/{classifier}")
            except ValueError:
                pass

        excludes = []
        extract = library.get("extract")
        if extract is not None:
            if not isinstance(extract, dict):
                raise ValueError(f"{path}/extract must be an object")
            excludes = extract.get("exclude", [])
            if not isinstance(excludes, list) or not all(isinstance(v, str) for v in excludes):
                raise ValueError(f"{path}/extract/exclude must be a list of strings")

        result.append(ClassifiedLibrary(name, parsed_classifiers, natives, excludes, rules))

    artifact = None if downloads is None else downloads.get("artifact")
    if artifact is not None:
        artifact = LibraryArtifact.from_json(artifact, f"{path}/downloads/artifact")
        if rules is None:
            result.append(PlainLibrary(name, artifact))
        else:
            result.append(PlatformGatedLibrary(name, artifact, rules))

    if not len(result):

        if name is None:
            raise ValueError(f"{path}/name must be a string")

        url = library.get("url")
        if url is not None and not isinstance(url, str):
            raise ValueError(f"{path}/url must be a string")

        result.append(LegacyMavenLibrary(name, url or None, natives, rules))

    return result


class LibrarySkip(Exception):
    """Internal exception raised when a library is not kept, the reason is given.
    """


def normalize(library: RawLibrary, platform: PlatformInfo, features: Optional[Dict[str, bool]] = None, *,
    legacy_os_features: bool = False,
    legacy_maven_url: str = LEGACY_MAVEN_URL
) -> Optional[ResolvedLibrary]:
    """Resolve a parsed library for the given platform, returning none if the library
    is not relevant for the platform or if it lacks information.
    """
    try:
        return _normalize(library, platform, features or {}, legacy_os_features, legacy_maven_url)
    except LibrarySkip:
        return None


def _normalize(library: RawLibrary, platform: PlatformInfo, features: Dict[str, bool],
    legacy_os_features: bool,
    legacy_maven_url: str
) -> ResolvedLibrary:

    if not isinstance(library, PlainLibrary):
        if not evaluate(library.rules, platform, features, legacy_os_features=legacy_os_features):
            raise LibrarySkip("denied by rules")

    if isinstance(library, ClassifiedLibrary):

        classifier = _native_classifier(library.natives, platform)
        artifact = library.classifiers.get(classifier)
        if artifact is None:
            raise LibrarySkip(f"no download for classifier {classifier}")

        return _from_artifact(library.name, artifact, classifier,
            is_native=True,
            extract_excludes=library.extract_excludes)

    elif isinstance(library, (PlainLibrary, PlatformGatedLibrary)):
        return _from_artifact(library.name, library.artifact, None)

    elif isinstance(library, LegacyMavenLibrary):

        try:
            spec = LibrarySpecifier.from_str(library.name)
        except ValueError as error:
            raise LibrarySkip(str(error))

        # Legacy specifiers have exactly group, artifact and version.
        if spec.classifier is not None:
            raise LibrarySkip("invalid library specifier: too many parts")

        if library.natives is not None:
            spec = spec.with_classifier(_native_classifier(library.natives, platform))

        repo_url = library.url or legacy_maven_url
        # Let's be sure to have a '/' as last character.
        if repo_url[-1] != "/":
            repo_url += "/"

        relative_path = spec.file_path()
        return ResolvedLibrary(library.name, f"{repo_url}{relative_path}", relative_path,
            is_native=library.natives is not None)

    raise LibrarySkip(f"unknown library shape: {type(library).__name__}")


def _native_classifier(natives: Dict[str, str], platform: PlatformInfo) -> str:

    classifier = natives.get(platform.os_name)
    if classifier is None:
        raise LibrarySkip(f"no native for {platform.os_name}")

    arch_bits = platform.arch_bits
    if arch_bits is not None:
        classifier = classifier.replace("${arch}", str(arch_bits))

    return classifier


def _from_artifact(name: Optional[str], artifact: LibraryArtifact, classifier: Optional[str], *,
    is_native: bool = False,
    extract_excludes: Optional[List[str]] = None
) -> ResolvedLibrary:

    if not len(artifact.url):
        # Such artifacts are produced locally by installers.
        raise LibrarySkip("empty artifact url")

    relative_path = artifact.path
    if not relative_path:
        if name is None:
            raise LibrarySkip("no artifact path nor name")
        try:
            spec = LibrarySpecifier.from_str(name)
        except ValueError as error:
            raise LibrarySkip(str(error))
        if classifier is not None:
            spec = spec.with_classifier(classifier)
        relative_path = spec.file_path()

    return ResolvedLibrary(name, artifact.url, relative_path,
        sha1=artifact.sha1,
        size=artifact.size,
        is_native=is_native,
        extract_excludes=extract_excludes)


def resolve_libraries(libraries: List[Any], platform: PlatformInfo, features: Optional[Dict[str, bool]] = None, *,
    legacy_os_features: bool = False,
    legacy_maven_url: str = LEGACY_MAVEN_URL,
    on_skip: Optional[Callable[[int, Optional[str], str], None]] = None
) -> List[ResolvedLibrary]:
    """Parse and normalize all raw library entries, in order, without de-duplication.

    :param on_skip: Called with the entry index, its name if known and the reason for
    every entry, or part of entry, that is skipped.
    """

    if features is None:
        features = {}

    result = []
    for library_idx, library in enumerate(libraries):

        path = f"metadata: /libraries/{library_idx}"
        try:
            shapes = parse_library(library, path)
        except ValueError as error:
            if on_skip is not None:
                name = library.get("name") if isinstance(library, dict) else None
                on_skip(library_idx, name if isinstance(name, str) else None, str(error))
            continue

        for shape in shapes:
            try:
                result.append(_normalize(shape, platform, features, legacy_os_features, legacy_maven_url))
            except LibrarySkip as skip:
                if on_skip is not None:
                    on_skip(library_idx, shape.name, str(skip))

    return result
