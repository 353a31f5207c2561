"""
Configuration for the code generation pipeline
"""

# Standard
from typing import Optional
import dataclasses
import os

# First Party
import alog

# Local
from .naming import DEFAULT_BUNDLE_MARKER

log = alog.use_channel("CONF")

## Globals #####################################################################

ENV_PREFIX = "POSTGEN_"

_TRUTHY = ("1", "true", "yes", "on")


## Interface ###################################################################


@dataclasses.dataclass
class PipelineConfig:
    """All knobs of the pipeline. Relative directories are resolved against
    workdir.
    """

    workdir: str = "."
    schema_dir: str = "jsonschema"
    go_dir: str = "go"
    bundle_marker: str = DEFAULT_BUNDLE_MARKER
    buf_binary: str = "buf"
    plugin_path: str = "proto/skiff/plugin"
    plugin_template: str = "buf-plugin.gen.yaml"
    image_path: Optional[str] = None
    lint: bool = True
    dry_run: bool = False

    @classmethod
    def from_env(cls, **overrides) -> "PipelineConfig":
        """Build a config from POSTGEN_<FIELD> environment variables. Explicit
        overrides that are not None take precedence.
        """
        kwargs = {}
        for field in dataclasses.fields(cls):
            env_val = os.environ.get(f"{ENV_PREFIX}{field.name.upper()}")
            if env_val is None:
                continue
            if field.type in (bool, "bool"):
                kwargs[field.name] = env_val.lower() in _TRUTHY
            else:
                kwargs[field.name] = env_val
        kwargs.update({key: val for key, val in overrides.items() if val is not None})
        log.debug3("Pipeline config kwargs: %s", kwargs)
        return cls(**kwargs)

    def resolve(self, path: str) -> str:
        """Resolve a configured path against workdir"""
        return path if os.path.isabs(path) else os.path.join(self.workdir, path)

    @property
    def schema_path(self) -> str:
        return self.resolve(self.schema_dir)

    @property
    def go_path(self) -> str:
        return self.resolve(self.go_dir)
