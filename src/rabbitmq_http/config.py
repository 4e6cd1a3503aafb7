"""Connection profiles and user configuration on disk.

Layout (Linux/BSD, following the XDG base directory conventions; on
macOS and Windows everything lives under ``~/.rabbitmq-http/``)::

    $XDG_CONFIG_HOME/rabbitmq-http/config.json          GlobalConfig
    $XDG_CONFIG_HOME/rabbitmq-http/profiles/<name>.json ConnectionProfile
    $XDG_DATA_HOME/rabbitmq-http/                       crash logs

A ``rabbitmq-http.json`` file in the current directory may pin the
profile a project uses. Passwords are never written to any of these
files: a profile names a *credential source* that
:func:`resolve_credential` reads at connection time.

Every write goes through :func:`_atomic_write`, so an interrupted save
leaves the previous file intact.
"""

from __future__ import annotations

import getpass
import json
import os
import platform
import re
import sys
import tempfile
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ValidationError

from rabbitmq_http.exceptions import ConfigError
from rabbitmq_http.models.profile import ConnectionProfile, GlobalConfig

_APP_NAME = "rabbitmq-http"
_CONFIG_FILENAME = "config.json"
_PROJECT_CONFIG_FILENAME = "rabbitmq-http.json"
_PROFILE_NAME = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")

PROFILE_ENV_VAR = "RABBITMQ_HTTP_PROFILE"
ENDPOINT_ENV_VAR = "RABBITMQ_HTTP_ENDPOINT"


# --- Directories ---


def _is_xdg_platform() -> bool:
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def _xdg_dir(env_var: str, *default_segments: str) -> Path:
    configured = os.environ.get(env_var, "")
    base = Path(configured) if configured else Path.home().joinpath(*default_segments)
    return base / _APP_NAME


def _ensure(path: Path) -> Path:
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_config_dir() -> Path:
    """Return (and create) the directory holding ``config.json`` and profiles."""
    if _is_xdg_platform():
        return _ensure(_xdg_dir("XDG_CONFIG_HOME", ".config"))
    return _ensure(Path.home() / f".{_APP_NAME}")


def get_data_dir() -> Path:
    """Return (and create) the directory crash logs are written to."""
    if _is_xdg_platform():
        return _ensure(_xdg_dir("XDG_DATA_HOME", ".local", "share"))
    return _ensure(Path.home() / f".{_APP_NAME}" / "logs")


def get_profiles_dir() -> Path:
    return _ensure(get_config_dir() / "profiles")


# --- File helpers ---


def _atomic_write(path: Path, data: str) -> None:
    """Replace *path* with *data* via a temp file in the same directory."""
    path.parent.mkdir(parents=True, exist_ok=True)
    handle = tempfile.NamedTemporaryFile(
        mode="w",
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
        delete=False,
        encoding="utf-8",
    )
    try:
        with handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(handle.name, path)
    except BaseException:
        try:
            os.unlink(handle.name)
        except OSError:
            pass
        raise


def _write_model(path: Path, model: BaseModel) -> None:
    _atomic_write(path, json.dumps(model.model_dump(mode="json"), indent=2) + "\n")


def _read_json(path: Path, what: str) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Cannot read {what} at {path}: {exc}") from exc


# --- Global config ---


def _global_config_path() -> Path:
    return get_config_dir() / _CONFIG_FILENAME


def load_global_config() -> GlobalConfig:
    """Load ``config.json``, or return defaults if there is none.

    Raises:
        ConfigError: If the file is not valid JSON or not a valid config.
    """
    path = _global_config_path()
    if not path.is_file():
        return GlobalConfig()
    try:
        return GlobalConfig.model_validate(_read_json(path, "global config"))
    except ValidationError as exc:
        raise ConfigError(f"Invalid global config at {path}: {exc}") from exc


def save_global_config(config: GlobalConfig) -> None:
    _write_model(_global_config_path(), config)


# --- Profiles ---


def _profile_path(name: str) -> Path:
    if not _PROFILE_NAME.match(name):
        raise ConfigError(
            f"Invalid profile name '{name}': use letters, digits, '.', '_' and '-'"
        )
    return get_profiles_dir() / f"{name}.json"


def list_profiles() -> list[str]:
    """Names of all saved profiles, sorted."""
    return sorted(path.stem for path in get_profiles_dir().glob("*.json") if path.is_file())


def profile_exists(name: str) -> bool:
    return _profile_path(name).is_file()


def load_profile(name: str) -> ConnectionProfile:
    """Load the profile saved as ``profiles/<name>.json``.

    Raises:
        ConfigError: If it does not exist or is invalid.
    """
    path = _profile_path(name)
    if not path.is_file():
        raise ConfigError(f"Profile '{name}' not found at {path}")
    try:
        return ConnectionProfile.model_validate(_read_json(path, f"profile '{name}'"))
    except ValidationError as exc:
        raise ConfigError(f"Invalid profile '{name}' at {path}: {exc}") from exc


def save_profile(profile: ConnectionProfile) -> Path:
    """Write *profile* to disk, replacing any profile of the same name."""
    path = _profile_path(profile.name)
    _write_model(path, profile)
    return path


def delete_profile(name: str) -> None:
    """Remove a saved profile.

    Raises:
        ConfigError: If it does not exist.
    """
    path = _profile_path(name)
    if not path.is_file():
        raise ConfigError(f"Profile '{name}' not found at {path}")
    path.unlink()


# --- Project-local config ---


def load_project_config() -> Optional[dict[str, Any]]:
    """Read ``./rabbitmq-http.json`` if present.

    Only its ``default_profile`` key is used.
    """
    path = Path.cwd() / _PROJECT_CONFIG_FILENAME
    if not path.is_file():
        return None
    data = _read_json(path, "project config")
    if not isinstance(data, dict):
        raise ConfigError(f"Project config at {path} must be a JSON object")
    return data


# --- Precedence resolution ---


def resolve_config(
    cli_profile: Optional[str] = None,
    cli_endpoint: Optional[str] = None,
    cli_format: Optional[str] = None,
) -> tuple[GlobalConfig, Optional[ConnectionProfile]]:
    """Work out the effective configuration and active profile.

    The profile name is taken from, in order: *cli_profile*,
    ``$RABBITMQ_HTTP_PROFILE``, the project's ``rabbitmq-http.json``, the
    global ``default_profile``, and finally the only saved profile if
    there is exactly one. The endpoint of the chosen profile can be
    overridden by *cli_endpoint* or ``$RABBITMQ_HTTP_ENDPOINT``.

    Returns:
        ``(global_config, profile_or_None)``.
    """
    global_cfg = load_global_config()
    project = load_project_config() or {}

    candidates = (
        cli_profile,
        os.environ.get(PROFILE_ENV_VAR) or None,
        project.get("default_profile"),
        global_cfg.default_profile,
    )
    name = next((candidate for candidate in candidates if candidate), None)
    if name is None and global_cfg.auto_select_single_profile:
        saved = list_profiles()
        if len(saved) == 1:
            name = saved[0]

    profile = load_profile(name) if name is not None else None

    endpoint = cli_endpoint or os.environ.get(ENDPOINT_ENV_VAR) or None
    if endpoint is not None:
        base = profile or ConnectionProfile(name="default")
        try:
            profile = ConnectionProfile.model_validate({**base.model_dump(), "endpoint": endpoint})
        except ValidationError as exc:
            raise ConfigError(f"Invalid endpoint {endpoint!r}: {exc}") from exc

    if cli_format is not None:
        global_cfg = global_cfg.model_copy(
            update={"output": global_cfg.output.model_copy(update={"format": cli_format})}
        )
    return global_cfg, profile


# --- Credential sources ---


def resolve_credential(source: str) -> str:
    """Read a password from its source descriptor.

    Supported forms:
        - ``env:VAR`` -- the value of environment variable ``VAR``
        - ``file:/path`` -- the file's content, surrounding whitespace stripped
        - ``prompt`` -- asked for interactively (stdin must be a TTY)
        - ``literal:value`` -- the value itself (the default ``guest`` profile)

    Raises:
        ConfigError: If the source cannot be resolved.
    """
    kind, _, argument = source.partition(":")

    if kind == "env" and argument:
        value = os.environ.get(argument)
        if value is None:
            raise ConfigError(f"Environment variable '{argument}' is not set (source: {source})")
        return value

    if kind == "file" and argument:
        path = Path(argument).expanduser()
        if not path.is_file():
            raise ConfigError(f"Credential file not found: {path} (source: {source})")
        try:
            return path.read_text(encoding="utf-8").strip()
        except OSError as exc:
            raise ConfigError(f"Cannot read credential file {path}: {exc}") from exc

    if source == "prompt":
        if not sys.stdin.isatty():
            raise ConfigError("Cannot prompt for a password: stdin is not a TTY (source: prompt)")
        return getpass.getpass("Password: ")

    if kind == "literal":
        return argument

    raise ConfigError(f"Unknown credential source format: {source}")
