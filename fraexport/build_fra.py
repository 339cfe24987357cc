#!/usr/bin/env python3
"""
Build FRA

Command line entry point: exports a project to <resourceId>.fra.

Pipeline:
1. Load export options (exporter.ini) and the project JSON
2. Parse the content manifest script
3. Run the export
4. Write <resourceId>.fra into every output folder (or --output)

Usage:
    python -m fraexport.build_fra --project project.json --config exporter.ini
"""

import sys
import argparse
from pathlib import Path
from typing import List

from fraexport.config import ExportConfig, load_export_config, parse_manifest
from fraexport.errors import ExportError
from fraexport.exporter import Exporter
from fraexport.project import ExportSource, load_project
from fraexport.utils import log, logError, init_logging, print_summary


class ConsoleProgress:
    """Logs progress in 10% steps."""

    def __init__(self, step: int = 10):
        self.step = step
        self._last = -1

    def __call__(self, value: int):
        bucket = value // self.step
        if bucket != self._last:
            self._last = bucket
            log(f"  Progress: {value}%")


def output_directories(source: ExportSource, project_path: Path, output_override: str = None) -> List[Path]:
    """Directories receiving the .fra file."""
    if output_override:
        return [Path(output_override)]
    base = project_path.parent
    folders = [base / folder.path for folder in source.output_folders if folder.path]
    return folders or [base]


def main():
    parser = argparse.ArgumentParser(
        description='Export a Fraymakers project to a .fra resource file',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Example:
    python -m fraexport.build_fra --project mychar/project.json

    # Readable header, smaller spritesheets:
    python -m fraexport.build_fra --project mychar/project.json --format prettify --recompress

    # Explicit output directory and options file:
    python -m fraexport.build_fra --project mychar/project.json --config exporter.ini --output dist
        """
    )

    parser.add_argument('--project', required=True,
                        help='Path to the project JSON file')
    parser.add_argument('--config', default=None,
                        help='Path to exporter.ini (defaults are used when omitted)')
    parser.add_argument('--format', choices=('raw', 'base64', 'prettify'), default=None,
                        help='Header format (overrides the config file)')
    parser.add_argument('--recompress', action='store_true',
                        help='Recompress spritesheet PNGs (slower, smaller)')
    parser.add_argument('--output', default=None,
                        help='Output directory (overrides the project output folders)')
    parser.add_argument('--log', default=None,
                        help='Log file path (default: ./export.log)')
    args = parser.parse_args()

    init_logging(Path(args.log) if args.log else None)

    try:
        config = load_export_config(args.config)
        if args.format or args.recompress:
            config = ExportConfig(
                version=config.version,
                json_format=args.format or config.json_format,
                recompress_images=args.recompress or config.recompress_images,
                default_sheet_width=config.default_sheet_width,
                default_sheet_height=config.default_sheet_height,
                max_sheet_width=config.max_sheet_width,
                max_sheet_height=config.max_sheet_height,
                sheet_padding=config.sheet_padding,
                decode_timeout=config.decode_timeout,
            )

        project_path = Path(args.project)
        source = load_project(project_path)
        manifest = parse_manifest(source.script_assets)
        log(f"Resource ID: {manifest.resource_id}")

        data = Exporter(source, config, on_progress=ConsoleProgress()).export()

        for directory in output_directories(source, project_path, args.output):
            directory.mkdir(parents=True, exist_ok=True)
            output_path = directory / manifest.filename
            output_path.write_bytes(data)
            log(f"Wrote {output_path} ({len(data):,} bytes)")

    except (ExportError, FileNotFoundError, ValueError, OSError) as e:
        error_type = e.error_type if isinstance(e, ExportError) else type(e).__name__
        logError(f"{error_type}: {e}")
        print_summary()
        sys.exit(1)

    print_summary()


if __name__ == '__main__':
    main()
