"""
Command line entrypoint for the schema post-generation steps
"""

# Standard
from typing import List, Optional
import argparse
import os
import sys

# First Party
import alog

# Local
from .config import PipelineConfig
from .errors import PostgenError
from .naming import rename_schema_files
from .pipeline import clean_outputs, flatten_schema_dir, run_pipeline

log = alog.use_channel("MAIN")


def configure_logging():
    """Configure alog from the environment"""
    alog.configure(
        default_level=os.environ.get("LOG_LEVEL", "info"),
        filters=os.environ.get("LOG_FILTERS", ""),
        formatter="json" if os.environ.get("LOG_JSON", "").lower() == "true" else "pretty",
        thread_id=os.environ.get("LOG_THREAD_ID", "").lower() == "true",
    )


def make_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jsonschema-postgen",
        description="Post-process protobuf generated JSON Schema files",
    )
    parser.add_argument("--workdir", "-w", default=None, help="Project root")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        default=None,
        help="Log the actions without changing anything",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    flatten_parser = subparsers.add_parser(
        "flatten", help="Inline $refs and strip bookkeeping keys"
    )
    flatten_parser.add_argument("schema_dir", nargs="?", default=None)
    flatten_parser.add_argument("--bundle-marker", default=None)

    rename_parser = subparsers.add_parser(
        "rename", help="Rename schema files to kebab-case message names"
    )
    rename_parser.add_argument("schema_dir", nargs="?", default=None)

    subparsers.add_parser("clean", help="Remove previously generated outputs")

    all_parser = subparsers.add_parser("all", help="Run the full pipeline")
    all_parser.add_argument("--no-lint", dest="lint", action="store_false", default=None)
    all_parser.add_argument("--image", dest="image_path", default=None)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    configure_logging()
    args = make_parser().parse_args(argv)
    config = PipelineConfig.from_env(
        workdir=args.workdir,
        dry_run=args.dry_run,
        schema_dir=getattr(args, "schema_dir", None),
        bundle_marker=getattr(args, "bundle_marker", None),
        lint=getattr(args, "lint", None),
        image_path=getattr(args, "image_path", None),
    )

    try:
        if args.command == "flatten":
            flatten_schema_dir(config)
        elif args.command == "rename":
            if config.dry_run:
                log.info("[dry run] Would rename schemas in %s", config.schema_path)
            else:
                rename_schema_files(config.schema_path)
        elif args.command == "clean":
            clean_outputs(config)
        else:
            run_pipeline(config)
    except PostgenError as err:
        log.error(str(err))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
