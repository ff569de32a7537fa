"""Configuration models describing divelog settings."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from divelog.store import DEFAULT_GIT_EXECUTABLE


class DivelogBaseModel(BaseModel):
    """Shared configuration for divelog Pydantic models."""

    model_config = ConfigDict(extra="forbid")


class StoreSettings(DivelogBaseModel):
    """Access to the versioned object store.

    Attributes:
        git_executable: Name or path of the git executable.
        default_branch: Reference walked when a location names no branch.
    """

    git_executable: str = DEFAULT_GIT_EXECUTABLE
    default_branch: str = "HEAD"


class LoaderSettings(DivelogBaseModel):
    """Options governing how a dive log tree is interpreted.

    Attributes:
        location_marker: Prefix marker stripped from location strings.
        trip_scoping: ``legacy`` keeps the active trip and dive until they
            are replaced, resetting the trip only for dives directly below a
            ``yyyy/mm/`` path; ``tree`` limits them to the directory subtree
            that set them.
    """

    location_marker: str = "git"
    trip_scoping: Literal["legacy", "tree"] = "legacy"


class LoggingSettings(DivelogBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level.
    """

    level: str = "WARNING"


class CLIOptions(DivelogBaseModel):
    """CLI behavior defaults.

    Attributes:
        quiet_default: Whether commands suppress non-error output by default.
        summary_default: Whether commands only print summary lines by default.
    """

    quiet_default: bool = False
    summary_default: bool = False


class DivelogConfig(DivelogBaseModel):
    """Top-level configuration struct for divelog.

    Attributes:
        store: Object store settings.
        loader: Tree interpretation settings.
        logging: Logging configuration.
        cli: CLI presentation defaults.
    """

    store: StoreSettings = Field(default_factory=StoreSettings)
    loader: LoaderSettings = Field(default_factory=LoaderSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    cli: CLIOptions = Field(default_factory=CLIOptions)


__all__ = [
    "DivelogBaseModel",
    "StoreSettings",
    "LoaderSettings",
    "LoggingSettings",
    "CLIOptions",
    "DivelogConfig",
]
