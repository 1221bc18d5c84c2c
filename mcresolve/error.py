"""Errors that abort a whole version resolution. Errors regarding a single library or
argument entry are never raised, such entries are skipped instead.
"""

from typing import List, Optional


class ResolveError(Exception):
    """Base class of all fatal resolution errors.
    """


class VersionNotFoundError(ResolveError):
    """Raised when a version, requested or ancestor, has no metadata. The version that 
    was not found is given.
    """
    def __init__(self, version: str) -> None:
        self.version = version
    
    def __str__(self) -> str:
        return repr(self.version)


class CyclicInheritanceError(ResolveError):
    """Raised when a version's hierarchy inherits from a version already in it. The
    repeated version is given, as well as the hierarchy walked so far.
    """
    def __init__(self, version: str, versions: List[str]) -> None:
        self.version = version
        self.versions = versions

    def __str__(self) -> str:
        return f"{self.version!r} in {self.versions!r}"


class TooMuchParentsError(ResolveError):
    """Raised when a version hierarchy is deeper than allowed. The hierarchy of versions
    is given in property `versions`.
    """
    def __init__(self, versions: List[str]) -> None:
        self.versions = versions

    def __str__(self) -> str:
        return repr(self.versions)


class MalformedDescriptorError(ResolveError):
    """Raised when version metadata can't be decoded or has an unexpected shape. The 
    message points to the problematic value, and the file it was read from is given if
    known.
    """
    def __init__(self, message: str, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path

    def __str__(self) -> str:
        if self.path is None:
            return self.message
        return f"{self.message} ({self.path})"


class IncompleteVersionError(ResolveError):
    """Raised when the merged metadata of a version lacks a required value. The missing
    field is given by its metadata name, such as 'mainClass'.
    """
    def __init__(self, version: str, field: str) -> None:
        self.version = version
        self.field = field

    def __str__(self) -> str:
        return f"{self.version!r} has no {self.field!r}"
