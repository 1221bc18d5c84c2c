"""Standard resolution of versions using the metadata format defined by Mojang. This
module ties together the chain resolution, the merge of metadata and the resolution
of libraries and arguments for a platform, reporting progress to a watcher.
"""

from pathlib import Path
import platform

from .model import RawDescriptor, MergedDescriptor, ResolvedLibrary, ResolvedVersion, \
    DEFAULT_JAVA_VERSION
from .chain import DescriptorLoader, DirectoryLoader, resolve_chain
from .library import LEGACY_MAVEN_URL, resolve_libraries
from .args import resolve_version_arguments
from .probe import PlatformInfo
from .merge import merge

from typing import Optional, Dict, List, Set, Any, Callable, Union


class Context:
    """Context of the game's installation. This defines the directories where versions,
    assets and libraries are stored.
    """

    def __init__(self, main_dir: Optional[Path] = None) -> None:
        """Construct a Minecraft installation context.

        :param main_dir: The main directory where versions, assets and libraries are
        installed. If not specified this path will be set the usual `.minecraft` (see
        https://minecraft.fandom.com/fr/wiki/.minecraft).
        """

        main_dir = get_minecraft_dir() if main_dir is None else main_dir
        self.main_dir = main_dir
        self.versions_dir = main_dir / "versions"
        self.assets_dir = main_dir / "assets"
        self.libraries_dir = main_dir / "libraries"

    def library_file(self, lib: ResolvedLibrary) -> Path:
        """Get the path where the given library should be installed.
        """
        return self.libraries_dir.joinpath(*lib.relative_path.split("/"))


class Watcher:
    """Base class for a watcher of the resolution process.
    """

    def handle(self, event: Any) -> None:
        """Called when the watcher can handle the given event. Default implementation
        does nothing.
        """


class SimpleWatcher(Watcher):
    """A watcher dispatching each event to the handler registered for its type.
    """

    def __init__(self, handlers: Dict[type, Callable[[Any], None]]) -> None:
        self.handlers = handlers

    def handle(self, event: Any) -> None:
        handler = self.handlers.get(type(event))
        if handler is not None:
            handler(event)


class Resolver:
    """Resolver of a version into a launch specification for a platform. Options are
    attributes that can be changed before calling `resolve`.
    """

    def __init__(self, version: Union[str, RawDescriptor], *,
        context: Optional[Context] = None,
        loader: Optional[DescriptorLoader] = None,
        platform: Optional[PlatformInfo] = None,
    ) -> None:
        """Construct a resolver for the given version.

        :param version: The version to resolve, given by its id or its metadata.
        :param context: The installation context, used for the default loader that
        reads versions from the context's versions directory.
        :param loader: The loader of versions' metadata, replacing the default one.
        :param platform: Platform to resolve for, the running one if not given.
        """

        self.version = version
        self.context = context or Context()
        self.loader = loader or DirectoryLoader(self.context.versions_dir)
        self.platform = platform or PlatformInfo.current()

        # Options
        self.features: Dict[str, bool] = {}
        self.legacy_os_features = False
        self.max_parents: Optional[int] = None
        self.legacy_maven_url = LEGACY_MAVEN_URL

        # Version chain, from the requested version to the root one
        self._chain: List[RawDescriptor] = []
        self._merged: Optional[MergedDescriptor] = None
        self._libraries: List[ResolvedLibrary] = []
        self._game_args: List[str] = []
        self._jvm_args: List[str] = []
        self._all_features: Set[str] = set()

    def resolve(self, *, watcher: Optional[Watcher] = None) -> ResolvedVersion:
        """Resolve the version, the result is only returned if all steps succeeded.

        :raises ResolveError: See `error` module for possible errors.
        """

        watcher = watcher or Watcher()

        self._resolve_chain(watcher)
        self._resolve_metadata(watcher)
        self._resolve_libraries(watcher)
        self._resolve_arguments(watcher)

        version = self._resolve_version(watcher)
        watcher.handle(VersionResolvedEvent(version))
        return version

    def _resolve_chain(self, watcher: Watcher) -> None:
        """This step loads the requested version and all of its parents.
        """

        loader = _WatchingLoader(self.loader, watcher)

        if isinstance(self.version, RawDescriptor):
            leaf = self.version
        else:
            leaf = loader.load(self.version)

        self._chain = resolve_chain(leaf, loader, max_parents=self.max_parents)
        watcher.handle(ChainResolvedEvent([desc.id for desc in self._chain]))

    def _resolve_metadata(self, watcher: Watcher) -> None:
        """This step merges the metadata of the chain and checks it.
        """
        self._merged = merge(self._chain)

    def _resolve_libraries(self, watcher: Watcher) -> None:
        """This step resolves libraries of the merged metadata for the platform.
        """

        assert self._merged is not None, "_resolve_metadata() missing"

        watcher.handle(LibrariesResolvingEvent())

        def on_skip(index: int, name: Optional[str], reason: str) -> None:
            watcher.handle(LibrarySkippedEvent(index, name, reason))

        self._libraries = resolve_libraries(self._merged.libraries, self.platform, self.features,
            legacy_os_features=self.legacy_os_features,
            legacy_maven_url=self.legacy_maven_url,
            on_skip=on_skip)

        native_count = sum(1 for lib in self._libraries if lib.is_native)
        watcher.handle(LibrariesResolvedEvent(len(self._libraries) - native_count, native_count))

    def _resolve_arguments(self, watcher: Watcher) -> None:
        """This step resolves game and JVM arguments for the platform and features.
        """

        assert self._merged is not None, "_resolve_metadata() missing"

        def on_skip(kind: str, index: int, reason: str) -> None:
            watcher.handle(ArgumentSkippedEvent(kind, index, reason))

        self._all_features.clear()
        self._game_args, self._jvm_args = resolve_version_arguments(self._merged, self.platform, self.features,
            legacy_os_features=self.legacy_os_features,
            all_features=self._all_features,
            on_skip=on_skip)

        watcher.handle(FeaturesEvent(sorted(self._all_features)))

    def _resolve_version(self, watcher: Watcher) -> ResolvedVersion:
        """This step builds the resolved version from the previous steps.
        """

        merged = self._merged
        assert merged is not None, "_resolve_metadata() missing"
        assert merged.main_class is not None and merged.asset_index is not None and merged.downloads is not None

        return ResolvedVersion(merged.id,
            main_class=merged.main_class,
            asset_index=merged.asset_index,
            assets=merged.assets or merged.asset_index.id,
            downloads=dict(merged.downloads),
            libraries=list(self._libraries),
            game_arguments=list(self._game_args),
            jvm_arguments=list(self._jvm_args),
            java_version=merged.java_version or DEFAULT_JAVA_VERSION,
            inheritances=[desc.id for desc in self._chain],
            path_chain=[desc.path for desc in self._chain if desc.path is not None],
            version_type=merged.type or "",
            release_time=merged.release_time or "",
            time=merged.time or "",
            logging=merged.logging,
            minimum_launcher_version=merged.minimum_launcher_version,
            minecraft_version=merged.client_version or self._chain[-1].id)


class _WatchingLoader(DescriptorLoader):
    """Internal loader forwarding to another loader and notifying a watcher.
    """

    def __init__(self, inner: DescriptorLoader, watcher: Watcher) -> None:
        self.inner = inner
        self.watcher = watcher

    def load(self, version: str) -> RawDescriptor:
        self.watcher.handle(VersionLoadingEvent(version))
        desc = self.inner.load(version)
        self.watcher.handle(VersionLoadedEvent(version, desc.path))
        return desc


class VersionEvent:
    """Base class for events regarding version.
    """
    __slots__ = "version",
    def __init__(self, version: str) -> None:
        self.version = version

class VersionLoadingEvent(VersionEvent):
    """Event triggered when a version is about to be loaded.
    """
    __slots__ = ()

class VersionLoadedEvent(VersionEvent):
    """Event triggered when a version has been loaded, with its file if known.
    """
    __slots__ = "path",
    def __init__(self, version: str, path: Optional[Path]) -> None:
        super().__init__(version)
        self.path = path

class ChainResolvedEvent:
    """Event triggered when the whole chain of versions is loaded.
    """
    __slots__ = "versions",
    def __init__(self, versions: List[str]) -> None:
        self.versions = versions

class LibrariesResolvingEvent:
    __slots__ = ()

class LibrarySkippedEvent:
    """Event triggered for each library, or part of library, that is not kept, which is
    expected for libraries of other platforms.
    """
    __slots__ = "index", "name", "reason"
    def __init__(self, index: int, name: Optional[str], reason: str) -> None:
        self.index = index
        self.name = name
        self.reason = reason

class LibrariesResolvedEvent:
    __slots__ = "class_libs_count", "native_libs_count"
    def __init__(self, class_libs_count: int, native_libs_count: int) -> None:
        self.class_libs_count = class_libs_count
        self.native_libs_count = native_libs_count

class ArgumentSkippedEvent:
    """Event triggered for each malformed argument, the kind is 'game' or 'jvm'.
    """
    __slots__ = "kind", "index", "reason"
    def __init__(self, kind: str, index: int, reason: str) -> None:
        self.kind = kind
        self.index = index
        self.reason = reason

class FeaturesEvent:
    """Event triggered when arguments are resolved, giving all features that are used
    by arguments' rules, enabled or not.
    """
    __slots__ = "features",
    def __init__(self, features: List[str]) -> None:
        self.features = features

class VersionResolvedEvent:
    __slots__ = "version",
    def __init__(self, version: ResolvedVersion) -> None:
        self.version = version


def resolve_version(version: Union[str, RawDescriptor], loader: DescriptorLoader, *,
    platform: Optional[PlatformInfo] = None,
    features: Optional[Dict[str, bool]] = None,
    watcher: Optional[Watcher] = None
) -> ResolvedVersion:
    """Shortcut for resolving a version with the given loader.
    """
    resolver = Resolver(version, loader=loader, platform=platform)
    if features is not None:
        resolver.features.update(features)
    return resolver.resolve(watcher=watcher)


def get_minecraft_dir() -> Path:
    """Internal function to get the default directory for installing
    and running Minecraft.
    """
    home = Path.home()
    return {
        "Windows": home.joinpath("AppData", "Roaming", ".minecraft"),
        "Darwin": home.joinpath("Library", "Application Support", "minecraft"),
    }.get(platform.system(), home / ".minecraft")
