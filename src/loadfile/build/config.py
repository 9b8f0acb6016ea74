"""Configuration for the build pass.

The load mode is chosen once per build and applies to every call site.
Configuration is merged with the following priority order (highest to
lowest):
1. Runtime Parameters (passed directly to functions or CLI options)
2. Environment Variables (prefixed with LOADFILE_)
3. Project Config ([tool.loadfile] in pyproject.toml)
4. Defaults (hardcoded fallbacks)
"""

import os
from enum import Enum
from pathlib import Path
from typing import Any, List, Optional

from pydantic import BaseModel, Field


class LoadMode(str, Enum):
    """How call sites obtain file content in a built artifact."""

    EMBED = "embed"
    RUNTIME = "runtime"


class BuildConfig(BaseModel):
    """Configuration model for one build.

    Instances are immutable so a build cannot change mode halfway through.
    """

    mode: LoadMode = Field(
        default=LoadMode.EMBED,
        description="Embed file content into the artifact or read it at call time",
    )

    early_check: bool = Field(
        default=False,
        description=(
            "In runtime mode, fail the build when a referenced file does not exist"
        ),
    )

    verbose: bool = Field(
        default=False,
        description="Log every call site decision",
    )

    exclude: List[str] = Field(
        default_factory=list,
        description="Glob patterns (relative to the source root) copied unexpanded",
    )

    model_config = {
        "extra": "forbid",
        "frozen": True,
    }


_TRUE_VALUES = ("true", "1", "yes", "on")


def _load_from_pyproject_toml(start: Optional[Path] = None) -> dict[str, Any]:
    """Load configuration from the [tool.loadfile] section in pyproject.toml.

    Searches *start* (default: the working directory) and its parents for
    the nearest ``pyproject.toml``.

    Returns:
        Dictionary with config values, or empty dict if not found.
    """
    try:
        import tomllib  # Python 3.11+
    except ImportError:
        try:
            import tomli as tomllib  # noqa: F401
        except ImportError:
            return {}

    current_dir = (start or Path.cwd()).absolute()
    for path in [current_dir] + list(current_dir.parents):
        pyproject_path = path / "pyproject.toml"
        if pyproject_path.exists():
            with open(pyproject_path, "rb") as f:
                data = tomllib.load(f)
            if "tool" in data and "loadfile" in data["tool"]:
                result: dict[str, Any] = dict(data["tool"]["loadfile"])
                return result
            return {}

    return {}


def _load_from_env() -> dict[str, Any]:
    """Load configuration from environment variables (prefixed with LOADFILE_).

    Returns:
        Dictionary with config values from environment.
    """
    config: dict[str, Any] = {}

    env_mapping = {
        "LOADFILE_MODE": "mode",
        "LOADFILE_EARLY_CHECK": "early_check",
        "LOADFILE_VERBOSE": "verbose",
    }

    for env_var, config_key in env_mapping.items():
        value = os.getenv(env_var)
        if value is None:
            continue
        if config_key in ("early_check", "verbose"):
            config[config_key] = value.lower() in _TRUE_VALUES
        else:
            config[config_key] = value.strip().lower()

    return config


def load_config(
    mode: Optional[str] = None,
    early_check: Optional[bool] = None,
    verbose: Optional[bool] = None,
    exclude: Optional[List[str]] = None,
    project_dir: Optional[Path] = None,
) -> BuildConfig:
    """Load build configuration with hierarchical priority.

    Args:
        mode: ``"embed"`` or ``"runtime"``.
        early_check: Check file existence at build time in runtime mode.
        verbose: Log each call site.
        exclude: Glob patterns of modules to copy without expanding.
        project_dir: Directory to start the ``pyproject.toml`` search from.

    Returns:
        BuildConfig instance with merged configuration.

    Raises:
        pydantic.ValidationError: If a merged value is invalid.
    """
    file_config = _load_from_pyproject_toml(project_dir)
    env_config = _load_from_env()

    runtime_config: dict[str, Any] = {}
    if mode is not None:
        runtime_config["mode"] = mode
    if early_check is not None:
        runtime_config["early_check"] = early_check
    if verbose is not None:
        runtime_config["verbose"] = verbose
    if exclude is not None:
        runtime_config["exclude"] = exclude

    merged_config = BuildConfig().model_dump()
    merged_config.update(file_config)
    merged_config.update(env_config)
    merged_config.update(runtime_config)

    return BuildConfig(**merged_config)
