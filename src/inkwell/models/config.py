"""Application configuration with Pydantic Settings."""

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class InkwellConfig(BaseSettings):
    """Application configuration with environment variable support.

    These settings drive the command line tool, not a single book: book
    options live in the book file and in ``BookOptions``.

    Configuration can be set via:
    1. Environment variables (prefixed with INKWELL_)
    2. .env file
    3. Direct instantiation

    Example:
        export INKWELL_OUTPUT_DIR=/path/to/books
        export INKWELL_LOG_LEVEL=DEBUG

        config = InkwellConfig()
        print(config.output_dir)  # /path/to/books
    """

    model_config = SettingsConfigDict(
        env_prefix="INKWELL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Paths
    output_dir: Path | None = Field(
        default=None,
        description="Directory for rendered files (defaults to output.base_path of the book)",
    )

    # Rendering defaults, applied before the book's own options
    default_formats: list[str] = Field(
        default_factory=lambda: ["html"],
        description="Formats rendered when neither the command line nor the book selects any",
    )
    nb_char: str = Field(
        default="\u202f",
        min_length=1,
        max_length=1,
        description="Non-breaking character inserted by the French cleaner",
    )

    # Logging
    log_level: str = Field(
        default="WARNING", description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    log_file: Path | None = Field(default=None, description="Optional log file path")
    verbose_report: bool = Field(
        default=False, description="Also list INFO messages in the end-of-run report"
    )

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        level = value.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"invalid log level: {value}")
        return level

    def validate_paths(self) -> None:
        """Create the output directory if one is configured."""
        if self.output_dir is not None:
            self.output_dir.mkdir(parents=True, exist_ok=True)
