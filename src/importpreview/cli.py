"""Command-line interface for importpreview."""

import argparse
import json
import logging
import sys
from pathlib import Path

import uvicorn
from pydantic import ValidationError

from .config import settings


def main():
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="importpreview - Import preview and column-mapping service"
    )
    parser.add_argument(
        "--log-level", default=settings.log_level, help="Logging level (default: from LOG_LEVEL)"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Server command
    server_parser = subparsers.add_parser("serve", help="Start the web server")
    server_parser.add_argument(
        "--host", default=settings.host, help=f"Host to bind to (default: {settings.host})"
    )
    server_parser.add_argument(
        "--port", type=int, default=settings.port, help=f"Port to bind to (default: {settings.port})"
    )
    server_parser.add_argument(
        "--reload", action="store_true", help="Enable auto-reload for development"
    )

    # Inspect command
    inspect_parser = subparsers.add_parser(
        "inspect", help="Print the column model and rows of a preview file"
    )
    inspect_parser.add_argument(
        "path", type=Path, help="JSON file with 'meta', 'preview_data' and 'import_log'"
    )
    inspect_parser.add_argument(
        "--flat", action="store_true", help="Print the flat rows as JSON instead"
    )

    args = parser.parse_args()
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "serve":
        run_server(args.host, args.port, args.reload)
    elif args.command == "inspect":
        sys.exit(run_inspect(args.path, args.flat))
    else:
        parser.print_help()
        sys.exit(1)


def run_server(host: str, port: int, reload: bool):
    """Run the web server."""
    uvicorn.run(
        "importpreview.api:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=True,
    )


def run_inspect(path: Path, flat: bool = False) -> int:
    """Build a preview from a JSON file and print it. Returns the exit code."""
    from .preview import ImportLogEntry, ImportPreview, NoPreviewDataError, PreviewPayload
    from .schema import DocTypeMeta

    try:
        document = json.loads(path.read_text())
        meta = DocTypeMeta(**document["meta"])
        preview_data = PreviewPayload(**document["preview_data"])
        import_log = [ImportLogEntry(**entry) for entry in document.get("import_log", [])]
    except (OSError, KeyError, json.JSONDecodeError, ValidationError) as e:
        print(f"Could not read preview file {path}: {e}")
        return 1

    try:
        preview = ImportPreview(meta, preview_data, import_log=import_log)
    except (NoPreviewDataError, ValueError) as e:
        print(f"Preview not built: {e}")
        return 1

    if flat:
        print(json.dumps(preview.to_flat_rows(), indent=2, default=str))
        return 0

    print(f"Preview of {preview.doctype}")
    print("=" * 40)
    for warning in preview.warnings:
        print(f"! {warning}")

    print("\nColumns:")
    for column in preview.columns:
        status = "mapped " if column.mapped else "skipped"
        print(f"  [{column.header_index:>3}] {status} {column.title} ({column.id})")

    print("\nRows:")
    for i in range(len(preview.grid)):
        cells = [preview.render_cell(i, j) for j in range(len(preview.columns))]
        marker = "✔" if any(cell.imported for cell in cells) else " "
        print(f"  {marker} " + " | ".join(str(cell.value) for cell in cells))

    return 0


if __name__ == "__main__":
    main()
