"""Global utilities used internally. The functions can be used externally but upward
compatibility is not guaranteed unless explicitly specified.
"""

from datetime import datetime

from typing import Optional, Tuple


def from_iso_date(raw: str) -> datetime:
    """Parse the ISO dates found in version metadata, such as `releaseTime`. A trailing
    `Z` is accepted as UTC.
    """
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    return datetime.fromisoformat(raw)


class LibrarySpecifier:
    """A maven coordinate 'group:artifact:version[:classifier][@extension]', the
    extension defaults to 'jar'.
    """

    __slots__ = "group", "artifact", "version", "classifier", "extension"

    def __init__(self, group: str, artifact: str, version: str, classifier: Optional[str] = None, extension: str = "jar"):
        self.group = group
        self.artifact = artifact
        self.version = version
        self.classifier = classifier
        self.extension = extension

    @classmethod
    def from_str(cls, s: str) -> "LibrarySpecifier":
        """Parse a coordinate string.

        :raises ValueError: If the coordinate hasn't 3 or 4 non-empty parts, or if the
        extension is empty.
        """

        coord, at, extension = s.partition("@")
        if at and not extension:
            raise ValueError("invalid library specifier: empty extension")

        parts = coord.split(":")
        if len(parts) < 3:
            raise ValueError("invalid library specifier: too few parts")
        if len(parts) > 4:
            raise ValueError("invalid library specifier: too many parts")
        if "" in parts:
            raise ValueError("invalid library specifier: empty part")

        classifier = parts[3] if len(parts) == 4 else None
        return cls(parts[0], parts[1], parts[2], classifier, extension or "jar")

    def with_classifier(self, classifier: Optional[str]) -> "LibrarySpecifier":
        """Return a copy of this specifier with another classifier.
        """
        return LibrarySpecifier(self.group, self.artifact, self.version, classifier, self.extension)

    def file_path(self) -> str:
        """Return the path of the file relative to the root of a maven repository,
        always separated with forward slashes so it's also usable in URLs.

        For example `com.foo:bar:1.0:natives@zip` gives
        `com/foo/bar/1.0/bar-1.0-natives.zip`.
        """
        suffix = "" if self.classifier is None else f"-{self.classifier}"
        file_name = f"{self.artifact}-{self.version}{suffix}.{self.extension}"
        return "/".join(self.group.split(".") + [self.artifact, self.version, file_name])

    def _key(self) -> Tuple[str, str, str, Optional[str], str]:
        return self.group, self.artifact, self.version, self.classifier, self.extension

    def __eq__(self, other) -> bool:
        return isinstance(other, LibrarySpecifier) and self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __str__(self) -> str:
        s = f"{self.group}:{self.artifact}:{self.version}"
        if self.classifier is not None:
            s += f":{self.classifier}"
        if self.extension != "jar":
            s += f"@{self.extension}"
        return s

    def __repr__(self) -> str:
        return f"<LibrarySpecifier {self}>"


def calc_input_sha1(input_stream, *, buffer_len: int = 8192) -> str:
    """Internal function to calculate the sha1 of an input stream.

    :param input_stream: The input stream that supports `readinto`.
    :param buffer_len: Internal buffer length, defaults to 8192
    :return: The sha1 string.
    """
    import hashlib
    h = hashlib.sha1()
    b = bytearray(buffer_len)
    mv = memoryview(b)
    for n in iter(lambda: input_stream.readinto(mv), 0):
        h.update(mv[:n])
    return h.hexdigest()
