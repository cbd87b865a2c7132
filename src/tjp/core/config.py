import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "tjp.toml"


@dataclass
class ParserConfig:
    """Scanner and parser settings."""

    include_paths: list[Path] = field(default_factory=list)  # searched after the including file's dir
    log_level: str = "WARNING"


@dataclass
class DefaultsConfig:
    """Project attribute defaults applied before the project header is parsed."""

    daily_working_hours: float = 8.0
    yearly_working_days: float = 260.714
    timing_resolution: int = 60  # minutes


@dataclass
class TjpConfig:
    """
    Settings of a parse session, usually read from ``tjp.toml``.
    """

    parser: ParserConfig = field(default_factory=ParserConfig)
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)
    source: Path | None = None


def load_config(path: Path | None = None) -> TjpConfig:
    """
    Read a ``tjp.toml`` file.

    A missing file yields the default configuration. Relative include paths
    are resolved against the directory of the configuration file.
    """
    if path is None:
        path = Path.cwd() / CONFIG_FILE_NAME
    if not path.is_file():
        logger.debug("No configuration at %s, using defaults", path)
        return TjpConfig()

    data = tomllib.loads(path.read_text(encoding="utf-8"))

    parser_data = data.get("parser", {})
    defaults_data = data.get("defaults", {})

    base = path.parent
    parser_config = ParserConfig(
        include_paths=[base / p for p in parser_data.get("include_paths", [])],
        log_level=parser_data.get("log_level", "WARNING"),
    )

    defaults_config = DefaultsConfig(
        daily_working_hours=float(defaults_data.get("daily_working_hours", 8.0)),
        yearly_working_days=float(defaults_data.get("yearly_working_days", 260.714)),
        timing_resolution=int(defaults_data.get("timing_resolution", 60)),
    )

    logger.debug("Loaded configuration from %s", path)
    return TjpConfig(parser=parser_config, defaults=defaults_config, source=path)
