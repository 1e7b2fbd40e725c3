"""
scaffold/generator.py -- Template copy and dependency install.

What a generated project contains:
  api/, auth/, core/        the backend packages, siblings of scaffold/ both in a
                            source checkout and in site-packages
  asgi.py, server.py        entry points
  .env.example, .gitignore  shipped as env.example / gitignore inside
                            scaffold/template/ (dotfiles are easy to lose in
                            package data) and renamed on copy
  requirements.txt, README.md

Bytecode caches are never copied. An existing non-empty target directory is
refused rather than merged into.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
import sys
from collections.abc import Callable
from pathlib import Path

logger = logging.getLogger("frenzy.scaffold")

SOURCE_ROOT = Path(__file__).resolve().parent.parent
TEMPLATE_DIR = Path(__file__).resolve().parent / "template"

TEMPLATE_PACKAGES = ("api", "auth", "core")
TEMPLATE_MODULES = ("asgi.py", "server.py")

# Files in TEMPLATE_DIR whose on-disk name differs from the generated one.
_RENAMES = {
    "env.example": ".env.example",
    "gitignore": ".gitignore",
}

_IGNORE = shutil.ignore_patterns("__pycache__", "*.pyc", "*.pyo")


class ScaffoldError(Exception):
    """Raised when a project cannot be generated."""


def _source_path(name: str) -> Path:
    path = SOURCE_ROOT / name
    if not path.exists():
        raise ScaffoldError(f"Template source '{name}' not found in {SOURCE_ROOT}")
    return path


def copy_template(target: Path) -> list[Path]:
    """Copy the backend template into target and return the top-level entries created.

    Raises ScaffoldError if target exists and is not empty, or if a template
    source cannot be located.
    """
    target = Path(target)
    if target.exists() and (not target.is_dir() or any(target.iterdir())):
        raise ScaffoldError(f"Directory '{target}' already exists and is not empty")

    sources: list[tuple[Path, str]] = [(_source_path(name), name) for name in TEMPLATE_PACKAGES + TEMPLATE_MODULES]
    sources += [
        (path, _RENAMES.get(path.name, path.name))
        for path in sorted(TEMPLATE_DIR.iterdir())
        if path.is_file()
    ]

    target.mkdir(parents=True, exist_ok=True)
    created: list[Path] = []
    for source, dest_name in sources:
        dest = target / dest_name
        if source.is_dir():
            shutil.copytree(source, dest, ignore=_IGNORE)
        else:
            shutil.copy2(source, dest)
        created.append(dest)
    logger.info("Copied %d template entries into %s", len(created), target)
    return created


def install_dependencies(target: Path, runner: Callable[..., subprocess.CompletedProcess] = subprocess.run) -> None:
    """Run pip against the generated requirements.txt, streaming its output.

    Uses the interpreter running the scaffolder so the install lands in the
    caller's active environment.
    """
    target = Path(target)
    if not (target / "requirements.txt").is_file():
        raise ScaffoldError(f"No requirements.txt in '{target}'")
    cmd = [sys.executable, "-m", "pip", "install", "-r", "requirements.txt"]
    try:
        runner(cmd, cwd=target, check=True)
    except subprocess.CalledProcessError as exc:
        raise ScaffoldError(f"Dependency install failed (exit code {exc.returncode})") from exc
    except OSError as exc:
        raise ScaffoldError(f"Could not run pip: {exc}") from exc
