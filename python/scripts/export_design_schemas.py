"""Write the design schemas and the reference catalogs a UI needs to start up.

Produces one ``<name>.schema.json`` per document in
:func:`enclosure_core.design_json_schemas`, a ``reference.json`` holding the
driver catalog, speaker presets and advice rules, and a ``manifest.json``
listing every file written.
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any

PYTHON_ROOT = Path(__file__).resolve().parent.parent

if str(PYTHON_ROOT) not in sys.path:
    sys.path.insert(0, str(PYTHON_ROOT))

from enclosure_core import (  # noqa: E402 - path adjusted above
    ADVICE_RULES,
    DRIVER_CATALOG,
    SPEAKER_PRESETS,
    design_json_schemas,
)


def reference_catalog() -> dict[str, Any]:
    """Return the static data the designer ships with."""

    return {
        "drivers": [driver.to_dict() for driver in DRIVER_CATALOG],
        "presets": {speaker.value: preset.to_dict() for speaker, preset in SPEAKER_PRESETS.items()},
        "rules": [rule.to_dict() for rule in ADVICE_RULES],
    }


def _dump(path: Path, payload: Any, indent: int | None) -> Path:
    path.write_text(json.dumps(payload, indent=indent, sort_keys=indent is not None) + "\n", encoding="utf-8")
    return path


def export_design_bundle(
    output_dir: Path,
    *,
    pretty: bool = False,
    include_reference: bool = True,
) -> list[Path]:
    """Write schemas (and optionally the reference catalog) into ``output_dir``.

    The manifest is written last and is included in the returned paths.
    """

    output_dir.mkdir(parents=True, exist_ok=True)
    indent = 2 if pretty else None

    written = [
        _dump(output_dir / f"{name}.schema.json", schema, indent)
        for name, schema in design_json_schemas().items()
    ]
    if include_reference:
        written.append(_dump(output_dir / "reference.json", reference_catalog(), indent))

    manifest = {"files": [path.name for path in written]}
    written.append(_dump(output_dir / "manifest.json", manifest, indent))
    return written


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Export enclosure design schemas and reference catalogs.")
    parser.add_argument("--output", type=Path, default=Path("design-exports"), help="Target directory.")
    parser.add_argument("--pretty", action="store_true", help="Indent and sort the JSON output.")
    parser.add_argument(
        "--schemas-only",
        action="store_true",
        help="Skip reference.json (drivers, presets and advice rules).",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    output_dir = args.output.expanduser()
    written = export_design_bundle(output_dir, pretty=args.pretty, include_reference=not args.schemas_only)
    print(f"Exported {len(written)} files to {output_dir.resolve()}")
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    raise SystemExit(main())
