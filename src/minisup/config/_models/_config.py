"""Top-level supervisor configuration model."""

from typing import Any, ClassVar, Self

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from minisup.config._models._logging import LoggingConfig
from minisup.exceptions import ConfigValidationError
from minisup.supervisor._models import ProcessSpec, RunMode


class SupervisorConfig(BaseModel):
    """Settings read once at service startup.

    Attributes:
        command: Executable to launch. Required to be non-empty for the
            supervisor to do any work.
        folder: Working directory for the process.
        arguments: Argument string for the process.
        type: Run mode, ``Simple`` or ``Daemon`` (case-insensitive).
        delay: Pacing delay in milliseconds applied after every iteration.
        output_limit: Maximum bytes kept per captured stream in Simple mode.
            Zero keeps everything.
        logging: Logging section.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True, extra="ignore")

    command: str = ""
    folder: str | None = None
    arguments: str | None = None
    type: RunMode = RunMode.SIMPLE
    delay: int = Field(default=30000, ge=0)
    output_limit: int = Field(default=0, ge=0)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("command", mode="before")
    @classmethod
    def _strip_command(cls, value: object) -> object:
        if value is None:
            return ""
        return value.strip() if isinstance(value, str) else value

    @field_validator("folder", "arguments", mode="before")
    @classmethod
    def _blank_to_none(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip() or None
        return value

    @field_validator("type", mode="before")
    @classmethod
    def _parse_type(cls, value: object) -> object:
        return value.strip().lower() if isinstance(value, str) else value

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:  # pyright: ignore[reportExplicitAny]
        """Create configuration from a dictionary.

        Args:
            data: Merged configuration values.

        Returns:
            The validated configuration.

        Raises:
            ConfigValidationError: If a value cannot be coerced to its type.
        """
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            first = e.errors()[0]
            key = ".".join(str(part) for part in first["loc"])
            msg = f"Invalid value for '{key}': {first['msg']}"
            raise ConfigValidationError(
                msg,
                key=key,
                value=first.get("input"),
                expected=first["msg"],
            ) from e

    @property
    def delay_seconds(self) -> float:
        """Return the pacing delay in seconds."""
        return self.delay / 1000

    @property
    def has_command(self) -> bool:
        """Return whether a command is configured."""
        return bool(self.command)

    def to_process_spec(self) -> ProcessSpec:
        """Build the immutable process spec.

        Raises:
            ConfigValidationError: If no command is configured.
        """
        return ProcessSpec.from_values(self.command, self.folder, self.arguments)

    def to_dict(self) -> dict[str, Any]:  # pyright: ignore[reportExplicitAny]
        """Return the configuration as plain data, omitting unset values."""
        return self.model_dump(mode="json", exclude_none=True)
