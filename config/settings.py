from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings


_PROJECT_ROOT = Path(__file__).resolve().parent.parent


class AnalysisConfig(BaseModel):
    """Numeric knobs for range selection, classification and break-even search."""

    model_config = {"frozen": True}

    # Payoff range
    plot_range_fraction: float = Field(0.10, gt=0)
    sample_count: int = Field(300, ge=2)

    # Absolute tolerance for strike equality and butterfly wing spacing
    strike_tolerance: float = Field(1e-8, ge=0)

    # Break-even search
    breakeven_epsilon: float = Field(1e-6, gt=0)
    breakeven_min_separation: float = Field(0.01, ge=0)
    breakeven_decimals: int = Field(2, ge=0)


class AppSettings(BaseSettings):
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_nested_delimiter": "__",
    }

    # Paths
    project_root: Path = _PROJECT_ROOT
    reports_dir: Path = _PROJECT_ROOT / "storage" / "reports"

    # Analysis defaults (ANALYSIS__SAMPLE_COUNT=500 etc.)
    analysis: AnalysisConfig = AnalysisConfig()

    # Logging
    log_level: str = "INFO"
    log_format: str = "text"  # "json" or "text"
    log_file: str = ""  # empty = storage/logs/payoff_analyzer.log


settings = AppSettings()
