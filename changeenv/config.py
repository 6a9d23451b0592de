"""Known environment names assembled from defaults, a user file and the environment."""

from __future__ import annotations

import logging
import os
from typing import FrozenSet, List, Mapping, Optional

from dotenv import load_dotenv

DEFAULT_ENVIRONMENTS = ("dev", "test", "prod")

_CONFIG_FILENAME = ".cenvrc"
_CONFIG_PATH_ENV = "CENV_CONFIG"
_ENVIRONMENTS_ENV = "CENV_ENVIRONMENTS"
_DOTENV_PATH_ENV = "CHANGEENV_DOTENV"
_USER_DOTENV_PARTS = (".config", "changeenv", ".env")

_LOGGER = logging.getLogger("changeenv.config")


def user_env_file(*, home: Optional[str] = None) -> Optional[str]:
    """Return the per-user dotenv file, ``~/.config/changeenv/.env``."""

    home_dir = home if home is not None else os.path.expanduser("~")
    if not home_dir or home_dir == "~":
        return None
    return os.path.join(home_dir, *_USER_DOTENV_PARTS)


def load_env_file(path: Optional[str] = None) -> bool:
    """Load a dotenv file without overriding variables already set.

    The file is *path*, ``$CHANGEENV_DOTENV`` or :func:`user_env_file`. The
    working directory is never searched. Returns True when a file was read.
    """

    dotenv_path = path or os.getenv(_DOTENV_PATH_ENV) or user_env_file()
    if not dotenv_path or not os.path.isfile(dotenv_path):
        return False
    loaded = load_dotenv(dotenv_path=dotenv_path, override=False)
    if loaded:
        _LOGGER.debug("Loaded environment overrides from %s", dotenv_path)
    return loaded


def parse_environment_file(text: str) -> List[str]:
    names: List[str] = []
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "#" in line:
            line = line.split("#", 1)[0].strip()
        if line:
            names.append(line)
    return names


def read_environment_file(path: str) -> List[str]:
    """Return the names listed in *path*; a missing or unreadable file yields none."""

    try:
        with open(path, "r", encoding="utf-8") as handle:
            text = handle.read()
    except FileNotFoundError:
        return []
    except (OSError, UnicodeDecodeError) as exc:
        _LOGGER.warning("Ignoring unreadable environment file %s: %s", path, exc)
        return []
    return parse_environment_file(text)


def parse_environment_variable(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return value.split()


def config_path(*, home: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """Return the location of the user's environment names file."""

    env = os.environ if environ is None else environ
    explicit = env.get(_CONFIG_PATH_ENV, "").strip()
    if explicit:
        return os.path.expanduser(explicit)

    home_dir = home if home is not None else os.path.expanduser("~")
    if not home_dir or home_dir == "~":
        return None
    return os.path.join(home_dir, _CONFIG_FILENAME)


def load_known_envs(
    *,
    home: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> FrozenSet[str]:
    """Return every environment name recognised for the current user.

    The set is the union of :data:`DEFAULT_ENVIRONMENTS`, the names listed in
    ``~/.cenvrc`` (or ``$CENV_CONFIG``) and the whitespace-separated names in
    ``$CENV_ENVIRONMENTS``. It is rebuilt on every call.
    """

    env = os.environ if environ is None else environ
    names = list(DEFAULT_ENVIRONMENTS)

    path = config_path(home=home, environ=env)
    if path:
        from_file = read_environment_file(path)
        if from_file:
            _LOGGER.debug("Read %d environment name(s) from %s", len(from_file), path)
        names.extend(from_file)

    names.extend(parse_environment_variable(env.get(_ENVIRONMENTS_ENV)))
    return frozenset(names)


__all__ = [
    "DEFAULT_ENVIRONMENTS",
    "config_path",
    "load_env_file",
    "load_known_envs",
    "parse_environment_file",
    "parse_environment_variable",
    "read_environment_file",
    "user_env_file",
]
