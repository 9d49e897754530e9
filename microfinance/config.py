"""Configuration management for microfinance."""

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from pathlib import Path

from microfinance.exceptions import ConfigurationError

GRANULARITIES = ("weekly", "monthly", "yearly")


@dataclass
class ReportConfig:
    """Period series configuration for dashboards and scheduled reports."""

    granularity: str = "monthly"
    periods: int = 12
    money_quantum: Decimal = Decimal("0.01")

    def __post_init__(self) -> None:
        if self.granularity not in GRANULARITIES:
            raise ConfigurationError(
                f"Unknown report granularity {self.granularity!r}, expected one of {GRANULARITIES}"
            )
        if self.periods < 1:
            raise ConfigurationError(f"Report periods must be positive, got {self.periods}")


@dataclass
class OutputConfig:
    """Output configuration."""

    json_output_dir: Path = field(default_factory=lambda: Path("output"))
    pretty_json: bool = False


@dataclass
class GeneratorConfig:
    """Configuration for synthetic portfolio generation."""

    num_loans: int = 20
    num_chit_funds: int = 5
    weekly_loan_rate: float = 0.30
    fixed_chit_fund_rate: float = 0.40
    locale: str = "en_IN"


@dataclass
class MicrofinanceConfig:
    """Main configuration for microfinance."""

    report: ReportConfig = field(default_factory=ReportConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    generator: GeneratorConfig = field(default_factory=GeneratorConfig)
    seed: int | None = None
    log_level: str = "INFO"
    log_format: str = "standard"
    calculator_log_level: str | None = None

    @classmethod
    def from_env(cls) -> "MicrofinanceConfig":
        """Create config from environment variables."""
        import os

        try:
            report = ReportConfig(
                granularity=os.getenv("REPORT_GRANULARITY", "monthly").lower(),
                periods=int(os.getenv("REPORT_PERIODS", "12")),
                money_quantum=Decimal(os.getenv("MONEY_QUANTUM", "0.01")),
            )
            seed = int(os.getenv("SEED")) if os.getenv("SEED") else None
        except (ValueError, InvalidOperation) as exc:
            raise ConfigurationError(f"Invalid numeric setting in environment: {exc}") from exc

        output = OutputConfig(
            json_output_dir=Path(os.getenv("OUTPUT_DIR", "output")),
            pretty_json=os.getenv("PRETTY_JSON", "false").lower() == "true",
        )

        generator = GeneratorConfig(locale=os.getenv("FAKER_LOCALE", "en_IN"))

        return cls(
            report=report,
            output=output,
            generator=generator,
            seed=seed,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
            calculator_log_level=os.getenv("LOG_CALCULATOR_LEVEL") or None,
        )
