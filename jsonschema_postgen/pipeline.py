"""
The end-to-end code generation pipeline: clean old outputs, run the buf
toolchain, then flatten and rename the generated JSON Schema files.
"""

# Standard
from typing import Callable, Dict, List, Optional
import dataclasses
import os
import shutil
import subprocess

# First Party
import alog

# Local
from .config import PipelineConfig
from .descriptor_names import find_missing_schemas, load_image
from .errors import SchemaWriteError, ToolchainError
from .filesystem import DirFS
from .flatten import flatten_schemas_in_fs
from .naming import rename_schema_files, write_flattened_updates

log = alog.use_channel("PIPE")

# Signature of the function used to run external commands
CommandRunner = Callable[[List[str], str, bool], None]


@dataclasses.dataclass
class PipelineResult:
    flattened: Dict[str, bytes]
    renamed: Dict[str, str]
    missing_schemas: List[str]


## Interface ###################################################################


def run_command(command: List[str], cwd: str, dry_run: bool = False):
    """Run an external command, raising ToolchainError if it fails"""
    if dry_run:
        log.info("[dry run] %s", " ".join(command))
        return
    log.debug("Running %s in %s", command, cwd)
    try:
        proc = subprocess.run(command, cwd=cwd, capture_output=True, text=True)
    except FileNotFoundError as err:
        raise ToolchainError(command, 127, str(err)) from err
    log.debug("Std Out--------\n%s", proc.stdout)
    log.debug("Std Err--------\n%s", proc.stderr)
    if proc.returncode != 0:
        raise ToolchainError(command, proc.returncode, proc.stderr)


def clean_outputs(config: PipelineConfig):
    """Remove previously generated outputs. Go sources are deleted one by one
    so that the go.mod next to them survives.
    """
    go_path = config.go_path
    removed = 0
    if os.path.isdir(go_path):
        for dirpath, _, filenames in os.walk(go_path):
            for filename in filenames:
                if filename.endswith(".go"):
                    go_file = os.path.join(dirpath, filename)
                    if not config.dry_run:
                        try:
                            os.remove(go_file)
                        except OSError as err:
                            raise SchemaWriteError(go_file, err) from err
                    removed += 1
    log.info("Removed %d generated go files from %s", removed, go_path)

    schema_path = config.schema_path
    if os.path.isdir(schema_path):
        log.info("Removing %s", schema_path)
        if not config.dry_run:
            try:
                shutil.rmtree(schema_path)
            except OSError as err:
                raise SchemaWriteError(schema_path, err) from err


def generate(config: PipelineConfig, runner: CommandRunner = run_command):
    """Run buf lint (optional) and the two buf generate passes"""
    buf = config.buf_binary
    if config.lint:
        runner([buf, "lint"], config.workdir, config.dry_run)
    runner(
        [buf, "generate", "--exclude-path", config.plugin_path],
        config.workdir,
        config.dry_run,
    )
    runner(
        [
            buf,
            "generate",
            "--template",
            config.plugin_template,
            "--path",
            config.plugin_path,
        ],
        config.workdir,
        config.dry_run,
    )
    if config.image_path:
        runner(
            [buf, "build", "--exclude-imports", "-o", config.image_path],
            config.workdir,
            config.dry_run,
        )


def flatten_schema_dir(config: PipelineConfig) -> Dict[str, bytes]:
    """Flatten the bundled schemas and store them under their unbundled names"""
    schema_path = config.schema_path
    if not os.path.isdir(schema_path):
        log.warning("Schema directory %s does not exist, nothing to flatten", schema_path)
        return {}
    updates = flatten_schemas_in_fs(DirFS(schema_path))
    if config.dry_run:
        log.info("[dry run] Would write %d flattened schemas", len(updates))
        return updates
    failed = write_flattened_updates(schema_path, updates, config.bundle_marker)
    if failed:
        raise SchemaWriteError(
            failed[0], OSError(f"{len(failed)} flattened schemas could not be written")
        )
    return updates


def run_pipeline(
    config: Optional[PipelineConfig] = None,
    runner: CommandRunner = run_command,
) -> PipelineResult:
    """Run every pipeline step in order. The first failure aborts the run."""
    config = config or PipelineConfig.from_env()
    log.info("Running code generation in %s", os.path.abspath(config.workdir))

    clean_outputs(config)
    generate(config, runner)
    flattened = flatten_schema_dir(config)

    renamed = {}
    if not config.dry_run:
        renamed = rename_schema_files(config.schema_path)

    missing = []
    if config.image_path and not config.dry_run:
        image = load_image(config.resolve(config.image_path))
        missing = find_missing_schemas(image, config.schema_path)

    log.info(
        "Pipeline done: %d flattened, %d renamed, %d missing",
        len(flattened),
        len(renamed),
        len(missing),
    )
    return PipelineResult(
        flattened=flattened,
        renamed=renamed,
        missing_schemas=missing,
    )
