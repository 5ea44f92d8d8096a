"""
Configuration Module
====================

Loads the pipeline configuration from a YAML file into dataclasses.

The configuration is built once at startup and handed to each phase, so
paths, the random seed and hyperparameters all live in one place.
"""

import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / "config" / "config.yaml"


@dataclass(frozen=True)
class DataConfig:
    raw_path: Path = Path("data/taxi-fare-full.csv")
    prepared_path: Path = Path("data/prepared-taxi-fare-full.csv")
    model_path: Path = Path("data/TaxiFareModel.joblib")


@dataclass(frozen=True)
class PreprocessingConfig:
    excluded_payment_type: str = "UNK"
    fare_min: float = 1.0
    fare_max: float = 150.0
    min_passenger_count: float = 1.0
    test_fraction: float = 0.2


@dataclass(frozen=True)
class ModelConfig:
    """Boosted-tree hyperparameters."""

    max_iter: int = 100
    max_leaf_nodes: int = 20
    max_depth: Optional[int] = None
    learning_rate: float = 0.2
    min_samples_leaf: int = 10
    l2_regularization: float = 0.0
    early_stopping: Union[bool, str] = "auto"
    validation_fraction: float = 0.1
    n_iter_no_change: int = 10


@dataclass(frozen=True)
class OutputConfig:
    reports_path: Path = Path("reports")
    logs_path: Path = Path("logs")
    save_figures: bool = True


@dataclass(frozen=True)
class PipelineConfig:
    """Top-level configuration passed to every pipeline phase."""

    data: DataConfig = field(default_factory=DataConfig)
    preprocessing: PreprocessingConfig = field(default_factory=PreprocessingConfig)
    model: ModelConfig = field(default_factory=ModelConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    random_state: int = 0
    log_level: str = "INFO"

    @property
    def figures_path(self) -> Path:
        return self.output.reports_path / "figures"

    @classmethod
    def from_dict(
        cls,
        raw: Dict[str, Any],
        base_dir: Optional[Path] = None
    ) -> "PipelineConfig":
        """
        Build a configuration from a parsed YAML mapping.

        Args:
            raw: Mapping with optional 'data', 'preprocessing', 'model',
                'output' and 'logging' sections
            base_dir: Directory that relative paths are resolved against

        Returns:
            PipelineConfig instance
        """
        raw = raw or {}

        data = _build_section(DataConfig, raw.get("data"))
        output = _build_section(OutputConfig, raw.get("output"))

        if base_dir is not None:
            data = DataConfig(
                raw_path=_resolve(data.raw_path, base_dir),
                prepared_path=_resolve(data.prepared_path, base_dir),
                model_path=_resolve(data.model_path, base_dir),
            )
            output = OutputConfig(
                reports_path=_resolve(output.reports_path, base_dir),
                logs_path=_resolve(output.logs_path, base_dir),
                save_figures=output.save_figures,
            )

        return cls(
            data=data,
            preprocessing=_build_section(PreprocessingConfig, raw.get("preprocessing")),
            model=_build_section(ModelConfig, raw.get("model")),
            output=output,
            random_state=int(raw.get("random_state", 0)),
            log_level=raw.get("logging", {}).get("level", "INFO"),
        )

    def with_raw_path(self, raw_path: Union[str, Path]) -> "PipelineConfig":
        """Return a copy reading a different input CSV; the cleaned file sits beside it."""
        raw_path = Path(raw_path)
        data = DataConfig(
            raw_path=raw_path,
            prepared_path=raw_path.with_name(f"prepared-{raw_path.name}"),
            model_path=self.data.model_path,
        )
        return PipelineConfig(
            data=data,
            preprocessing=self.preprocessing,
            model=self.model,
            output=self.output,
            random_state=self.random_state,
            log_level=self.log_level,
        )


def _build_section(section_cls, values: Optional[Dict[str, Any]]):
    values = values or {}
    known = {f.name for f in fields(section_cls)}
    unknown = set(values) - known
    if unknown:
        raise ValueError(
            f"Unknown keys in '{section_cls.__name__}' section: {sorted(unknown)}"
        )
    kwargs = {}
    for f in fields(section_cls):
        if f.name in values:
            value = values[f.name]
            if f.type is Path:
                value = Path(value)
            kwargs[f.name] = value
    return section_cls(**kwargs)


def _resolve(path: Path, base_dir: Path) -> Path:
    return path if path.is_absolute() else (base_dir / path).resolve()


def load_config(config_path: Optional[Union[str, Path]] = None) -> PipelineConfig:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to the configuration file. When None, the
            built-in defaults are returned.

    Returns:
        PipelineConfig with relative paths resolved against the
        directory containing the file

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If config file is malformed
    """
    if config_path is None:
        return PipelineConfig()

    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, 'r') as f:
        raw = yaml.safe_load(f)

    config = PipelineConfig.from_dict(raw, base_dir=config_path.resolve().parent)
    logger.info(f"Loaded configuration from {config_path}")
    return config
