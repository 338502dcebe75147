"""Exception types raised while synthesizing workspace manifests.

Fatal errors abort the whole synthesis run. A malformed version specifier is
not fatal: the classifier recovers from it and reports a warning instead.
"""

from __future__ import annotations

from collections.abc import Iterable


class WorkspaceManifestsError(Exception):
    """Base class for all errors raised by workspace-manifests."""


class ConfigurationError(WorkspaceManifestsError):
    """Invalid or incomplete workspace input.

    Attributes:
        projects: Names of the projects that triggered the error.
    """

    def __init__(self, message: str, projects: Iterable[str] = ()) -> None:
        super().__init__(message)
        self.projects = tuple(projects)


class NamespaceCollisionError(ConfigurationError):
    """A synthetic package identity collides with another name.

    Raised when two projects synthesize to the same name, or when a project
    depends on a package whose name is a synthetic identity.

    Attributes:
        projects: Names of the projects involved.
        package_names: The colliding package name(s).
    """

    def __init__(
        self,
        message: str,
        projects: Iterable[str] = (),
        package_names: Iterable[str] = (),
    ) -> None:
        super().__init__(message, projects)
        self.package_names = tuple(package_names)


class MalformedSpecifierError(WorkspaceManifestsError, ValueError):
    """A version specifier could not be parsed."""

    def __init__(self, specifier: str, reason: str = "") -> None:
        detail = f": {reason}" if reason else ""
        super().__init__(f"Malformed version specifier {specifier!r}{detail}")
        self.specifier = specifier
