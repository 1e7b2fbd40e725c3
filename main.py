#!/usr/bin/env python3
"""
create-frenzy-backend -- Scaffold a minimal authenticated FastAPI backend.

Copies the backend template (health check, registration, login, JWT auth,
rate limiting, uniform errors) into ./<project-name> and installs its
dependencies with pip.

Usage:
  create-frenzy-backend my-api
  create-frenzy-backend my-api --skip-install
  python main.py my-api
"""

import argparse
import sys
from pathlib import Path
from typing import Optional

from scaffold.generator import ScaffoldError, copy_template, install_dependencies


def _next_steps(project_name: str, installed: bool) -> str:
    steps = [f"  cd {project_name}", "  cp .env.example .env"]
    if not installed:
        steps.append("  pip install -r requirements.txt")
    steps.append("  python server.py")
    return "\nFrenzy Backend ready!\n\nNext steps:\n" + "\n".join(steps) + "\n"


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="create-frenzy-backend",
        description="Scaffold a minimal authenticated FastAPI backend.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  create-frenzy-backend my-api
  create-frenzy-backend my-api --skip-install
        """,
    )
    parser.add_argument(
        "project_name",
        nargs="?",
        metavar="PROJECT-NAME",
        help="Directory to create under the current working directory",
    )
    parser.add_argument(
        "--skip-install",
        action="store_true",
        help="Copy the template only; do not run pip install",
    )
    args = parser.parse_args(argv)

    if not args.project_name:
        print("  [!] Please provide a project name", file=sys.stderr)
        return 1

    target = Path.cwd() / args.project_name

    try:
        copy_template(target)
        if not args.skip_install:
            print("Installing dependencies...", flush=True)
            install_dependencies(target)
    except ScaffoldError as e:
        print(f"  [!] {e}", file=sys.stderr)
        return 1

    print(_next_steps(args.project_name, installed=not args.skip_install))
    return 0


if __name__ == "__main__":
    sys.exit(main())
