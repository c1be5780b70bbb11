from __future__ import annotations

import argparse
from pathlib import Path

from event_planner.planner.catalog import DEFAULT_CATALOG_ROOT, load_catalog
from event_planner.planner.errors import CatalogError


def validate_catalog_dir(root: Path) -> list[str]:
    try:
        catalog = load_catalog(root)
    except CatalogError as e:
        return [str(e)]

    issues: list[str] = []
    known_families = {family.name for family in catalog.families}
    for name in sorted(known_families - set(catalog.family_tasks)):
        issues.append(f"family '{name}' has no specialized tasks")
    return issues


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Validate a timeline rule catalog.")
    parser.add_argument(
        "root",
        type=str,
        nargs="?",
        default=str(DEFAULT_CATALOG_ROOT),
        help="Directory with the catalog YAML files (default: packaged catalog)",
    )
    args = parser.parse_args(argv)

    root = Path(args.root).resolve()
    issues = validate_catalog_dir(root)
    if not issues:
        print(f"OK: catalog valid under {root}")
        return 0

    print(f"FAILED: {len(issues)} catalog issue(s) under {root}\n")
    for issue in issues:
        print(f"- {issue}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
