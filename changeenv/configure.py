"""Install the ``cenv`` shell helper that wraps ``changeenv`` with ``cd``."""

from __future__ import annotations

import logging
import os
import shutil
import sys
from typing import Callable, List, Mapping, Optional, TextIO

from changeenv.exceptions import ConfigureError

SHELL_HELPER_SNIPPET = 'cenv() { cd "$(changeenv "$1")"; }'

_EXECUTABLE_NAME = "changeenv"

_LOGGER = logging.getLogger("changeenv.configure")


def detect_shell_name(shell_path: Optional[str]) -> str:
    if not shell_path:
        return ""
    return os.path.basename(shell_path)


def resolve_config_path(
    shell_name: str,
    home_dir: str,
    zdotdir: str,
    exists: Callable[[str], bool],
) -> str:
    """Pick the startup file that should receive the helper.

    Candidates are ordered by shell preference with ``~/.profile`` last. The
    first existing candidate wins; otherwise the first candidate is returned,
    or ``""`` when there are none.
    """

    candidates: List[str] = []

    def _add(path: str) -> None:
        if path and path not in candidates:
            candidates.append(path)

    if shell_name == "zsh":
        if zdotdir:
            _add(os.path.join(zdotdir, ".zshrc"))
        if home_dir:
            _add(os.path.join(home_dir, ".zshrc"))
    elif shell_name == "bash":
        if home_dir:
            _add(os.path.join(home_dir, ".bashrc"))
            _add(os.path.join(home_dir, ".bash_profile"))
    if home_dir:
        _add(os.path.join(home_dir, ".profile"))

    for candidate in candidates:
        if exists(candidate):
            return candidate
    return candidates[0] if candidates else ""


def append_snippet(config_path: str, snippet: str) -> bool:
    """Append *snippet* to *config_path* unless it is already present.

    Returns True when the file was modified.
    """

    try:
        with open(config_path, "r", encoding="utf-8") as handle:
            existing = handle.read()
    except FileNotFoundError:
        existing = ""
    except OSError as exc:
        raise ConfigureError(f"read {config_path}: {exc}") from exc

    if snippet in existing:
        return False

    directory = os.path.dirname(config_path)
    try:
        if directory:
            os.makedirs(directory, mode=0o755, exist_ok=True)
    except OSError as exc:
        raise ConfigureError(f"create config directory: {exc}") from exc

    addition = ""
    if existing and not existing.endswith("\n"):
        addition += "\n"
    addition += "\n" + snippet + "\n"

    try:
        with open(config_path, "a", encoding="utf-8") as handle:
            handle.write(addition)
    except OSError as exc:
        raise ConfigureError(f"write {config_path}: {exc}") from exc
    _LOGGER.info("Appended snippet to %s", config_path)
    return True


def display_path(path: str, home_dir: str) -> str:
    if home_dir and path == home_dir:
        return "~"
    if home_dir and path.startswith(home_dir + os.sep):
        return os.path.join("~", path[len(home_dir):].lstrip(os.sep))
    return path


def executable_dir() -> str:
    """Return the directory holding the installed ``changeenv`` script.

    Raises:
        FileNotFoundError: If the script location cannot be determined.
    """

    executable = shutil.which(_EXECUTABLE_NAME) or (sys.argv[0] if sys.argv else "")
    if not executable:
        raise FileNotFoundError("executable path is empty")
    return os.path.dirname(os.path.realpath(executable))


def expand_tilde(path: str, home_dir: str) -> str:
    if not home_dir:
        return path
    if path == "~":
        return home_dir
    if path.startswith("~" + os.sep) or path.startswith("~/"):
        return os.path.join(home_dir, path[2:])
    return path


def paths_equal(first: str, second: str) -> bool:
    if os.name == "nt":
        return first.lower() == second.lower()
    return first == second


def dir_on_path(directory: str, path_env: str, home_dir: str) -> bool:
    """Return True when *directory* is listed in the *path_env* search path."""

    if not directory:
        return True
    wanted = os.path.abspath(directory)
    for entry in path_env.split(os.pathsep):
        if not entry:
            continue
        candidate = os.path.abspath(expand_tilde(entry, home_dir))
        if paths_equal(candidate, wanted):
            return True
    return False


def escape_for_double_quotes(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def export_path_snippet(directory: str) -> str:
    return f'export PATH="$PATH:{escape_for_double_quotes(directory)}"'


def shell_single_quote(value: str) -> str:
    return "'" + value.replace("'", "'\\''") + "'"


def print_configure_instructions(
    shell_name: str,
    config_display_path: str,
    auto_apply: bool,
    binary_dir: str,
    on_path: bool,
    *,
    stream: Optional[TextIO] = None,
) -> None:
    out = stream or sys.stdout

    def _emit(line: str = "") -> None:
        out.write(line + "\n")

    if shell_name:
        _emit(f"Detected shell: {shell_name}")
    else:
        _emit("Could not determine the active shell from $SHELL.")

    _emit()
    _emit("Add the following function to your shell configuration:")
    _emit()
    _emit(SHELL_HELPER_SNIPPET)
    _emit()

    if not config_display_path:
        _emit("Unable to determine a configuration file path automatically.")
        return

    _emit("Suggested command:")
    _emit(f"  printf '\\n%s\\n' {shell_single_quote(SHELL_HELPER_SNIPPET)} >> {config_display_path}")
    if binary_dir and not on_path:
        _emit("Add the binary directory to PATH:")
        _emit(
            f"  printf '\\n%s\\n' {shell_single_quote(export_path_snippet(binary_dir))} >> {config_display_path}"
        )
    elif not binary_dir:
        _emit("Ensure the directory containing changeenv is on your PATH.")
    if not auto_apply:
        _emit("Or run: changeenv configure --create")


def run_configure(
    auto_apply: bool,
    *,
    stream: Optional[TextIO] = None,
    environ: Optional[Mapping[str, str]] = None,
    home: Optional[str] = None,
    binary_dir: Optional[str] = None,
) -> None:
    """Print the helper snippet and, with *auto_apply*, append it to the shell config.

    Raises:
        ConfigureError: If *auto_apply* is set and no configuration file can be
            determined, or the file cannot be updated.
    """

    env = os.environ if environ is None else environ
    out = stream or sys.stdout

    shell_name = detect_shell_name(env.get("SHELL"))
    home_dir = home if home is not None else os.path.expanduser("~")
    if home_dir == "~":
        raise ConfigureError("determine user home directory: HOME is not set")

    if binary_dir is None:
        try:
            binary_dir = executable_dir()
        except FileNotFoundError as exc:
            _LOGGER.debug("Could not locate changeenv executable: %s", exc)
            binary_dir = ""
    on_path = dir_on_path(binary_dir, env.get("PATH", ""), home_dir)

    config_path = resolve_config_path(shell_name, home_dir, env.get("ZDOTDIR", ""), os.path.exists)
    if not config_path:
        print_configure_instructions(shell_name, "", auto_apply, binary_dir, on_path, stream=out)
        if auto_apply:
            raise ConfigureError("unable to determine configuration file path; rerun without --create")
        return

    shown = display_path(config_path, home_dir)
    print_configure_instructions(shell_name, shown, auto_apply, binary_dir, on_path, stream=out)
    if not auto_apply:
        return

    if append_snippet(config_path, SHELL_HELPER_SNIPPET):
        out.write(f"Added helper function to {shown}\n")
    else:
        out.write(f"Helper function already present in {shown}\n")

    if not binary_dir:
        return
    if on_path:
        out.write("Binary directory already present in PATH\n")
        return

    if append_snippet(config_path, export_path_snippet(binary_dir)):
        out.write(f"Added binary directory to PATH in {shown}\n")
    else:
        out.write(f"Binary directory already exported in {shown}\n")


__all__ = [
    "SHELL_HELPER_SNIPPET",
    "append_snippet",
    "detect_shell_name",
    "dir_on_path",
    "display_path",
    "escape_for_double_quotes",
    "executable_dir",
    "expand_tilde",
    "export_path_snippet",
    "print_configure_instructions",
    "resolve_config_path",
    "run_configure",
    "shell_single_quote",
]
