#!/usr/bin/env python3
"""
Bump the selecto version.

Rewrites the version in both places it is declared:
- pyproject.toml (version = "x.y.z")
- selecto/__init__.py (__version__ = "x.y.z")

Usage:
    python scripts/bump_version.py <new_version>

Example:
    python scripts/bump_version.py 0.2.0
"""

import argparse
import re
import sys
from pathlib import Path

VERSION_FILES = [
    (Path("pyproject.toml"), r'^version\s*=\s*".*?"$', 'version = "{}"'),
    (Path("selecto/__init__.py"), r'^__version__\s*=\s*".*?"$', '__version__ = "{}"'),
]


def replace_version(path: Path, pattern: str, template: str, new_version: str) -> None:
    """Substitute the first version declaration in path, exiting on failure."""
    if not path.exists():
        print(f"Error: {path} not found")
        sys.exit(1)

    content = path.read_text()
    updated, count = re.subn(
        pattern, template.format(new_version), content, count=1, flags=re.MULTILINE
    )
    if not count:
        print(f"Error: Could not find a version declaration in {path}")
        sys.exit(1)

    path.write_text(updated)
    print(f"Updated {path} to {new_version}")


def validate_version_format(version: str) -> bool:
    """Accept plain x.y.z versions only."""
    return bool(re.match(r"^\d+\.\d+\.\d+$", version))


def main():
    parser = argparse.ArgumentParser(description="Bump version in the selecto project")
    parser.add_argument("version", help="New version number (format: x.y.z)")
    args = parser.parse_args()

    if not validate_version_format(args.version):
        print(f"Error: Invalid version format '{args.version}'. Expected format: x.y.z")
        sys.exit(1)

    for path, pattern, template in VERSION_FILES:
        replace_version(path, pattern, template, args.version)
    print(f"\nVersion successfully bumped to {args.version}")


if __name__ == "__main__":
    main()
