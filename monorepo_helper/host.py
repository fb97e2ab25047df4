"""Interfaces of the host package manager.

The monorepo repository plugs into a host resolver through these
protocols. Simple in-memory implementations are provided for standalone
use (the CLI) and for tests.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field


class Package(BaseModel):
    """A loaded package record handed to the resolver.

    Attributes:
        name: Package name (e.g. "acme/foo").
        version: Version offered to the resolver.
        type: Package type, "library" if the manifest does not say.
        dist: How to fetch the package (type, url, reference).
        transport_options: Hints for the installer (e.g. symlink).
        data: The full manifest document the package was loaded from.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    version: str
    type: str = "library"
    dist: dict[str, Any] = Field(default_factory=dict)
    transport_options: dict[str, Any] = Field(default_factory=dict)
    data: dict[str, Any] = Field(default_factory=dict)


class PackageLoader(Protocol):
    """Turns a raw package document into the host's package object."""

    def load(self, data: Mapping[str, Any]) -> Any: ...


class Repository(Protocol):
    """A source of packages the host resolver can query."""

    def get_packages(self) -> list[Any]: ...


class RepositoryManager(Protocol):
    """Keeps the host's repositories in priority order."""

    def prepend_repository(self, repository: Repository) -> None: ...


class Host(Protocol):
    """The package manager the plugin is activated in.

    Attributes:
        root_manifest: Parsed manifest of the root project.
        repository_manager: Where the monorepo repository is registered.
    """

    root_manifest: Mapping[str, Any]
    repository_manager: RepositoryManager


class ArrayLoader:
    """Loads manifest documents into Package records."""

    def load(self, data: Mapping[str, Any]) -> Package:
        if "name" not in data:
            raise KeyError("Package document has no 'name'")
        return Package(
            name=str(data["name"]),
            version=str(data.get("version", "")),
            type=str(data.get("type", "library")),
            dist=dict(data.get("dist", {})),
            transport_options=dict(data.get("transport-options", {})),
            data=dict(data),
        )


class InMemoryRepositoryManager:
    """Ordered list of repositories, first one wins."""

    def __init__(self) -> None:
        self.repositories: list[Repository] = []

    def prepend_repository(self, repository: Repository) -> None:
        self.repositories.insert(0, repository)

    def add_repository(self, repository: Repository) -> None:
        self.repositories.append(repository)

    def find_packages(self, name: str) -> list[Any]:
        """Return packages named name, from highest priority repository down."""
        found: list[Any] = []
        for repository in self.repositories:
            found.extend(
                package
                for package in repository.get_packages()
                if getattr(package, "name", None) == name
            )
        return found


class SimpleHost:
    """Minimal Host used outside a real package manager."""

    def __init__(
        self,
        root_manifest: Mapping[str, Any] | None = None,
        repository_manager: InMemoryRepositoryManager | None = None,
    ) -> None:
        self.root_manifest: Mapping[str, Any] = root_manifest or {}
        self.repository_manager = repository_manager or InMemoryRepositoryManager()
