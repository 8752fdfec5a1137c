# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Source declaration models persisted in the project configuration."""

from __future__ import annotations

import re
from pathlib import PurePosixPath
from typing import Annotated, Final, Literal
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, field_validator

CRATES_IO_DOWNLOAD_URL: Final[str] = "https://crates.io/api/v1/crates/{name}/{version}/download"

_SEMVER_RE: Final[re.Pattern[str]] = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    r"(?:-[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?"
    r"(?:\+[0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*)?$",
)

_NIX_PATH_RE: Final[re.Pattern[str]] = re.compile(r"^(?:<[A-Za-z0-9_.+/-]+>|[A-Za-z0-9_.+/-]+)$")
_NIX_ATTR_PATH_RE: Final[re.Pattern[str]] = re.compile(
    r"^[A-Za-z_][A-Za-z0-9_'-]*(?:\.[A-Za-z_][A-Za-z0-9_'-]*)*$",
)


class _SourceBase(BaseModel):
    """Behaviour shared by every source declaration variant."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    @property
    def is_complete(self) -> bool:
        """Return ``True`` when the declaration carries everything needed to fetch it."""

        return getattr(self, "sha256", None) is not None

    @property
    def is_reproducible(self) -> bool:
        """Return ``True`` when the source identity is pinned by a content hash."""

        return True

    def default_name(self) -> str | None:
        """Return the configuration key used when none is given explicitly."""

        raise NotImplementedError


class RegistrySource(_SourceBase):
    """A crate downloaded from crates.io."""

    type: Literal["CratesIo"] = "CratesIo"
    name: str = Field(min_length=1)
    version: str
    sha256: str | None = None

    @field_validator("version")
    @classmethod
    def _validate_version(cls, value: str) -> str:
        if not _SEMVER_RE.match(value):
            raise ValueError(f"'{value}' is not a semantic version")
        return value

    @property
    def download_url(self) -> str:
        """Return the crates.io download URL for this crate version."""

        return CRATES_IO_DOWNLOAD_URL.format(name=self.name, version=self.version)

    def default_name(self) -> str | None:
        return self.name

    def __str__(self) -> str:
        return f"{self.name} {self.version} from crates.io"


class GitSource(_SourceBase):
    """A git repository checked out at a fixed revision.

    ``ref`` optionally names the branch containing ``rev``; it is passed to
    ``fetchgit`` as ``branchName``.
    """

    type: Literal["Git"] = "Git"
    url: str
    rev: str = Field(min_length=1)
    ref_name: str | None = Field(default=None, alias="ref")
    sha256: str | None = None

    @field_validator("url")
    @classmethod
    def _validate_url(cls, value: str) -> str:
        parts = urlsplit(value)
        if not parts.scheme or not (parts.netloc or parts.path):
            raise ValueError(f"'{value}' is not an absolute URL")
        return value

    def default_name(self) -> str | None:
        segments = [segment for segment in urlsplit(self.url).path.split("/") if segment]
        if not segments:
            return None
        name = segments[-1]
        if name.endswith(".git"):
            name = name[: -len(".git")]
        return name or None

    def __str__(self) -> str:
        return f"{self.url}#{self.rev}"


class NixSource(_SourceBase):
    """A source produced by evaluating an existing Nix expression.

    The expression is resolved by the build executor itself, so its result can
    change without the configuration changing.
    """

    type: Literal["Nix"] = "Nix"
    file: str = Field(min_length=1)
    attr: str | None = None

    @field_validator("file")
    @classmethod
    def _validate_file(cls, value: str) -> str:
        if not _NIX_PATH_RE.match(value):
            raise ValueError(f"'{value}' is not a Nix path literal or <lookup> path")
        return value

    @field_validator("attr")
    @classmethod
    def _validate_attr(cls, value: str | None) -> str | None:
        if value is not None and not _NIX_ATTR_PATH_RE.match(value):
            raise ValueError(f"'{value}' is not a dotted Nix attribute path")
        return value

    @property
    def is_complete(self) -> bool:
        return True

    @property
    def is_reproducible(self) -> bool:
        return False

    def default_name(self) -> str | None:
        if self.attr:
            return self.attr.rsplit(".", 1)[-1] or None
        path = PurePosixPath(self.file.strip("<>"))
        return (path.stem if path.suffix == ".nix" else path.name) or None

    def __str__(self) -> str:
        return f"{self.file}#{self.attr}" if self.attr else self.file


SourceDeclaration = Annotated[
    RegistrySource | GitSource | NixSource,
    Field(discriminator="type"),
]

HashableSource = RegistrySource | GitSource


__all__ = [
    "CRATES_IO_DOWNLOAD_URL",
    "GitSource",
    "HashableSource",
    "NixSource",
    "RegistrySource",
    "SourceDeclaration",
]
