"""Typed records for version metadata, as loaded from JSON files, as merged along the
inheritance chain, and as finally resolved for a platform.
"""

from datetime import datetime
from pathlib import Path

from .error import MalformedDescriptorError
from .util import from_iso_date

from typing import Optional, Dict, List, Any


def _is_int(value: Any) -> bool:
    # JSON booleans are decoded as bool, which is a subclass of int.
    return isinstance(value, int) and not isinstance(value, bool)


class Download:
    """A downloadable file, the URL is required while the size and SHA-1 are optional
    because some third-party metadata don't give them.
    """

    __slots__ = "url", "size", "sha1"

    def __init__(self, url: str, size: Optional[int] = None, sha1: Optional[str] = None) -> None:
        self.url = url
        self.size = size
        self.sha1 = sha1

    @classmethod
    def from_json(cls, value: Any, path: str) -> "Download":
        """Parse a download entry, raising `ValueError` with the given JSON path if the
        entry is invalid.
        """

        if not isinstance(value, dict):
            raise ValueError(f"{path} must be an object")

        url = value.get("url")
        if not isinstance(url, str):
            raise ValueError(f"{path}/url must be a string")

        size = value.get("size")
        if size is not None and not _is_int(size):
            raise ValueError(f"{path}/size must be an integer")

        sha1 = value.get("sha1")
        if sha1 is not None and not isinstance(sha1, str):
            raise ValueError(f"{path}/sha1 must be a string")

        return cls(url, size, sha1)

    def __eq__(self, other) -> bool:
        return isinstance(other, Download) and \
            (self.url, self.size, self.sha1) == (other.url, other.size, other.sha1)

    def __repr__(self) -> str:
        return f"<Download {self.url}>"


class AssetIndex:
    """Reference to the asset index file of a version.
    """

    __slots__ = "id", "url", "size", "total_size", "sha1"

    def __init__(self, id: str = "", url: str = "", size: int = 0, total_size: int = 0, sha1: Optional[str] = None) -> None:
        self.id = id
        self.url = url
        self.size = size
        self.total_size = total_size
        self.sha1 = sha1

    @classmethod
    def from_json(cls, value: Any, path: str) -> "AssetIndex":

        if not isinstance(value, dict):
            raise ValueError(f"{path} must be an object")

        index = cls()
        for key, attr, ty in (("id", "id", str), ("url", "url", str), ("size", "size", int), ("totalSize", "total_size", int)):
            field = value.get(key)
            if field is not None:
                if not (isinstance(field, str) if ty is str else _is_int(field)):
                    raise ValueError(f"{path}/{key} must be {'a string' if ty is str else 'an integer'}")
                setattr(index, attr, field)

        sha1 = value.get("sha1")
        if sha1 is not None and not isinstance(sha1, str):
            raise ValueError(f"{path}/sha1 must be a string")
        index.sha1 = sha1

        return index

    def is_default(self) -> bool:
        """Return true if this index has no information at all, this is what you get
        with an empty object.
        """
        return self == AssetIndex()

    def __eq__(self, other) -> bool:
        return isinstance(other, AssetIndex) and \
            (self.id, self.url, self.size, self.total_size, self.sha1) == \
            (other.id, other.url, other.size, other.total_size, other.sha1)

    def __repr__(self) -> str:
        return f"<AssetIndex {self.id}>"


class JavaVersion:
    """The Java runtime required by a version, the component is the name of Mojang's
    runtime distribution, such as 'jre-legacy' or 'java-runtime-gamma'.
    """

    __slots__ = "component", "major_version"

    def __init__(self, component: str, major_version: int) -> None:
        self.component = component
        self.major_version = major_version

    @classmethod
    def from_json(cls, value: Any, path: str) -> "JavaVersion":

        if not isinstance(value, dict):
            raise ValueError(f"{path} must be an object")

        # Some third-party metadata only give the major version.
        component = value.get("component", "jre-legacy")
        if not isinstance(component, str):
            raise ValueError(f"{path}/component must be a string")

        major_version = value.get("majorVersion")
        if not _is_int(major_version):
            raise ValueError(f"{path}/majorVersion must be an integer")

        return cls(component, major_version)

    def __eq__(self, other) -> bool:
        return isinstance(other, JavaVersion) and \
            (self.component, self.major_version) == (other.component, other.major_version)

    def __repr__(self) -> str:
        return f"<JavaVersion {self.component} {self.major_version}>"


# Runtime used when no version in the hierarchy specifies one.
DEFAULT_JAVA_VERSION = JavaVersion("jre-legacy", 8)


class LoggingConfig:
    """Logger configuration of one side (usually 'client'). The argument contains a
    '${path}' placeholder that should be replaced with the path of the downloaded file.
    """

    __slots__ = "id", "argument", "type", "file"

    def __init__(self, id: str, argument: str, type: str, file: Download) -> None:
        self.id = id
        self.argument = argument
        self.type = type
        self.file = file

    @classmethod
    def from_json(cls, value: Any, path: str) -> "LoggingConfig":

        if not isinstance(value, dict):
            raise ValueError(f"{path} must be an object")

        argument = value.get("argument")
        if not isinstance(argument, str):
            raise ValueError(f"{path}/argument must be a string")

        type_ = value.get("type", "")
        if not isinstance(type_, str):
            raise ValueError(f"{path}/type must be a string")

        file_info = value.get("file")
        if not isinstance(file_info, dict):
            raise ValueError(f"{path}/file must be an object")

        file_id = file_info.get("id")
        if not isinstance(file_id, str):
            raise ValueError(f"{path}/file/id must be a string")

        return cls(file_id, argument, type_, Download.from_json(file_info, f"{path}/file"))

    def __repr__(self) -> str:
        return f"<LoggingConfig {self.id}>"


class RawDescriptor:
    """Metadata of a single version, as loaded from its JSON file. Every field but the
    identifier is optional because versions inheriting from another one only give what
    they change. Libraries and arguments are kept untyped, they are parsed per entry
    later in order to tolerate unknown shapes.
    """

    __slots__ = "id", "inherits_from", "type", "time", "release_time", "main_class", \
        "assets", "asset_index", "downloads", "libraries", "game_arguments", \
        "jvm_arguments", "minecraft_arguments", "logging", "java_version", \
        "minimum_launcher_version", "client_version", "path"

    def __init__(self, id: str, *,
        inherits_from: Optional[str] = None,
        type: Optional[str] = None,
        time: Optional[str] = None,
        release_time: Optional[str] = None,
        main_class: Optional[str] = None,
        assets: Optional[str] = None,
        asset_index: Optional[AssetIndex] = None,
        downloads: Optional[Dict[str, Download]] = None,
        libraries: Optional[List[Any]] = None,
        game_arguments: Optional[List[Any]] = None,
        jvm_arguments: Optional[List[Any]] = None,
        minecraft_arguments: Optional[str] = None,
        logging: Optional[Dict[str, LoggingConfig]] = None,
        java_version: Optional[JavaVersion] = None,
        minimum_launcher_version: Optional[int] = None,
        client_version: Optional[str] = None,
        path: Optional[Path] = None,
    ) -> None:
        self.id = id
        self.inherits_from = inherits_from
        self.type = type
        self.time = time
        self.release_time = release_time
        self.main_class = main_class
        self.assets = assets
        self.asset_index = asset_index
        self.downloads = downloads
        self.libraries = libraries
        self.game_arguments = game_arguments
        self.jvm_arguments = jvm_arguments
        self.minecraft_arguments = minecraft_arguments
        self.logging = logging
        self.java_version = java_version
        self.minimum_launcher_version = minimum_launcher_version
        self.client_version = client_version
        self.path = path

    @classmethod
    def from_json(cls, data: Any, path: Optional[Path] = None) -> "RawDescriptor":
        """Parse a decoded version metadata JSON object.

        :param data: The decoded JSON value.
        :param path: The file the metadata was read from, only kept for diagnostics.
        :raises MalformedDescriptorError: If a known field has an unexpected type.
        """
        try:
            return cls._from_json(data, path)
        except ValueError as error:
            raise MalformedDescriptorError(str(error), None if path is None else str(path))

    @classmethod
    def _from_json(cls, data: Any, path: Optional[Path]) -> "RawDescriptor":

        if not isinstance(data, dict):
            raise ValueError("metadata: / must be an object")

        version_id = data.get("id")
        if not isinstance(version_id, str) or not len(version_id):
            raise ValueError("metadata: /id must be a non-empty string")

        desc = cls(version_id, path=path)

        for key, attr in (
            ("inheritsFrom", "inherits_from"),
            ("type", "type"),
            ("time", "time"),
            ("releaseTime", "release_time"),
            ("mainClass", "main_class"),
            ("assets", "assets"),
            ("minecraftArguments", "minecraft_arguments"),
            ("clientVersion", "client_version"),
        ):
            value = data.get(key)
            if value is not None:
                if not isinstance(value, str):
                    raise ValueError(f"metadata: /{key} must be a string")
                setattr(desc, attr, value)

        min_version = data.get("minimumLauncherVersion")
        if min_version is not None:
            if not _is_int(min_version):
                raise ValueError("metadata: /minimumLauncherVersion must be an integer")
            desc.minimum_launcher_version = min_version

        asset_index = data.get("assetIndex")
        if asset_index is not None:
            desc.asset_index = AssetIndex.from_json(asset_index, "metadata: /assetIndex")

        downloads = data.get("downloads")
        if downloads is not None:
            if not isinstance(downloads, dict):
                raise ValueError("metadata: /downloads must be an object")
            desc.downloads = {
                role: Download.from_json(dl, f"metadata: /downloads/{role}")
                for role, dl in downloads.items()
            }

        libraries = data.get("libraries")
        if libraries is not None:
            if not isinstance(libraries, list):
                raise ValueError("metadata: /libraries must be a list")
            desc.libraries = libraries

        arguments = data.get("arguments")
        if arguments is not None:
            if not isinstance(arguments, dict):
                raise ValueError("metadata: /arguments must be an object")
            for kind in ("game", "jvm"):
                kind_args = arguments.get(kind)
                if kind_args is not None:
                    if not isinstance(kind_args, list):
                        raise ValueError(f"metadata: /arguments/{kind} must be a list")
                    setattr(desc, f"{kind}_arguments", kind_args)

        logging = data.get("logging")
        if logging is not None:
            if not isinstance(logging, dict):
                raise ValueError("metadata: /logging must be an object")
            desc.logging = {
                side: LoggingConfig.from_json(config, f"metadata: /logging/{side}")
                for side, config in logging.items()
            }

        java_version = data.get("javaVersion")
        if java_version is not None:
            desc.java_version = JavaVersion.from_json(java_version, "metadata: /javaVersion")

        return desc

    def __repr__(self) -> str:
        return f"<RawDescriptor {self.id}>"


class MergedDescriptor:
    """Metadata of a whole version hierarchy merged together. Scalar values are taken
    from the most specific version defining them, libraries and arguments are the
    concatenation of all versions' ones, ancestors first.
    """

    __slots__ = "id", "type", "time", "release_time", "main_class", "assets", \
        "asset_index", "downloads", "libraries", "game_arguments", "jvm_arguments", \
        "minecraft_arguments", "logging", "java_version", "minimum_launcher_version", \
        "client_version"

    def __init__(self, id: str) -> None:
        self.id = id
        self.type: Optional[str] = None
        self.time: Optional[str] = None
        self.release_time: Optional[str] = None
        self.main_class: Optional[str] = None
        self.assets: Optional[str] = None
        self.asset_index: Optional[AssetIndex] = None
        self.downloads: Optional[Dict[str, Download]] = None
        self.libraries: List[Any] = []
        self.game_arguments: Optional[List[Any]] = None
        self.jvm_arguments: Optional[List[Any]] = None
        self.minecraft_arguments: Optional[str] = None
        self.logging: Optional[Dict[str, LoggingConfig]] = None
        self.java_version: Optional[JavaVersion] = None
        self.minimum_launcher_version = 0
        self.client_version: Optional[str] = None

    def __repr__(self) -> str:
        return f"<MergedDescriptor {self.id}>"


class ResolvedLibrary:
    """A library ready to be downloaded and placed on the class path, or extracted if
    native. The relative path is relative to the libraries directory and uses forward
    slashes. The size and SHA-1 are unknown for legacy libraries.
    """

    __slots__ = "name", "url", "relative_path", "sha1", "size", "is_native", "extract_excludes"

    def __init__(self, name: Optional[str], url: str, relative_path: str, *,
        sha1: Optional[str] = None,
        size: Optional[int] = None,
        is_native: bool = False,
        extract_excludes: Optional[List[str]] = None
    ) -> None:
        self.name = name
        self.url = url
        self.relative_path = relative_path
        self.sha1 = sha1
        self.size = size
        self.is_native = is_native
        self.extract_excludes = extract_excludes or []

    def __eq__(self, other) -> bool:
        return isinstance(other, ResolvedLibrary) and \
            (self.name, self.url, self.relative_path, self.sha1, self.size, self.is_native, self.extract_excludes) == \
            (other.name, other.url, other.relative_path, other.sha1, other.size, other.is_native, other.extract_excludes)

    def __repr__(self) -> str:
        return f"<ResolvedLibrary {self.name or self.relative_path}{' (native)' if self.is_native else ''}>"


class ResolvedVersion:
    """The fully resolved version, ready to be installed and launched. Arguments still
    contain their '${...}' placeholders.

    The inheritances list starts with the requested version and ends with the root
    one. The path chain lists the metadata files consulted, in the same order, for
    versions whose file is known.
    """

    def __init__(self, id: str, *,
        main_class: str,
        asset_index: AssetIndex,
        assets: str,
        downloads: Dict[str, Download],
        libraries: List[ResolvedLibrary],
        game_arguments: List[str],
        jvm_arguments: List[str],
        java_version: JavaVersion,
        inheritances: List[str],
        path_chain: List[Path],
        version_type: str = "",
        release_time: str = "",
        time: str = "",
        logging: Optional[Dict[str, LoggingConfig]] = None,
        minimum_launcher_version: int = 0,
        minecraft_version: str = "",
    ) -> None:
        self.id = id
        self.main_class = main_class
        self.asset_index = asset_index
        self.assets = assets
        self.downloads = downloads
        self.libraries = libraries
        self.game_arguments = game_arguments
        self.jvm_arguments = jvm_arguments
        self.java_version = java_version
        self.inheritances = inheritances
        self.path_chain = path_chain
        self.version_type = version_type
        self.release_time = release_time
        self.time = time
        self.logging = logging or {}
        self.minimum_launcher_version = minimum_launcher_version
        self.minecraft_version = minecraft_version

    @property
    def class_libraries(self) -> List[ResolvedLibrary]:
        return [lib for lib in self.libraries if not lib.is_native]

    @property
    def native_libraries(self) -> List[ResolvedLibrary]:
        return [lib for lib in self.libraries if lib.is_native]

    def release_datetime(self) -> Optional[datetime]:
        """Parse the release time, if any.
        """
        return from_iso_date(self.release_time) if len(self.release_time) else None

    def __repr__(self) -> str:
        return f"<ResolvedVersion {self.id}>"
