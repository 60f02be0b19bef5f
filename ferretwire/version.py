"""Build version information recorded from git."""

from __future__ import annotations

import argparse
import logging
import os
import subprocess
import sys
from collections.abc import Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

GIT_BIN = "git"

_OUTPUTS = (
    ("version.txt", "describe --tags --dirty"),
    ("commit.txt", "rev-parse HEAD"),
    ("branch.txt", "branch --show-current"),
)

_TRUE = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE = {"0", "f", "F", "FALSE", "false", "False"}

_logger = logging.getLogger(__name__).getChild("git")


@dataclass
class Info:
    """Version, commit and build details of the running build."""

    version: str = ""
    commit: str = ""
    branch: str = ""
    dirty: bool = False
    debug: bool = False
    build_environment: dict[str, str] | None = None


def run_git(args: list[str], stdout: BinaryIO) -> None:
    """Run git with ``args``, sending its output to ``stdout``."""
    cmd = [GIT_BIN, *args]
    _logger.debug("Running %s", " ".join(cmd))
    try:
        subprocess.run(cmd, stdin=subprocess.DEVNULL, stdout=stdout, check=True)
    except (subprocess.CalledProcessError, OSError) as exc:
        raise RuntimeError(f"{' '.join(args)} failed: {exc}") from exc


def _write_output(path: Path, args: list[str]) -> Path:
    with open(path, "wb") as out:
        run_git(args, out)
    return path


def generate(directory: str | os.PathLike = ".") -> list[Path]:
    """Write version.txt, commit.txt and branch.txt into ``directory``."""
    base = Path(directory)
    with ThreadPoolExecutor(max_workers=len(_OUTPUTS)) as pool:
        futures = [
            pool.submit(_write_output, base / name, args.split(" "))
            for name, args in _OUTPUTS
        ]
        return [future.result() for future in futures]


def _parse_bool(value: str) -> bool | None:
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    return None


def _settings_items(
    settings: Mapping[str, str] | Iterable[tuple[str, str]],
) -> Iterable[tuple[str, str]]:
    if isinstance(settings, Mapping):
        return settings.items()
    return settings


def load_info(
    directory: str | os.PathLike,
    build_settings: Mapping[str, str] | Iterable[tuple[str, str]] | None = None,
) -> Info:
    """Build an ``Info`` from the generated files and optional build settings.

    Raises ``ValueError`` if the ``vcs.revision`` setting disagrees with commit.txt.
    """
    base = Path(directory)
    info = Info(
        version=(base / "version.txt").read_text(encoding="utf-8").strip(),
        commit=(base / "commit.txt").read_text(encoding="utf-8").strip(),
        branch=(base / "branch.txt").read_text(encoding="utf-8").strip(),
    )

    if build_settings is None:
        return info

    info.build_environment = {}
    for key, value in _settings_items(build_settings):
        info.build_environment[key] = value

        if key == "vcs.revision":
            if value != info.commit:
                raise ValueError(
                    f"commit.txt value {info.commit!r} != vcs.revision value {value!r}"
                )
        elif key == "vcs.modified":
            info.dirty = bool(_parse_bool(value))
        elif key == "-race":
            if _parse_bool(value):
                info.debug = True
        elif key == "-tags":
            if "testcover" in value.split(","):
                info.debug = True

    return info


def main(argv: list[str] | None = None) -> int:
    """Generate the version files; return the process exit code."""
    parser = argparse.ArgumentParser(description="Record version information from git.")
    parser.add_argument("directory", nargs="?", default=".", help="where to write the files")
    options = parser.parse_args(argv)

    try:
        generate(options.directory)
    except (RuntimeError, OSError) as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0