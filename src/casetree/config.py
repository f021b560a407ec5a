"""
Configuration models for casetree.

`RunnerConfig` carries the process-wide defaults consumed during collection
(timeouts, shuffle-on-collection); `TaskOptions` carries the per-declaration
overrides accepted by `test(...)` and `describe(...)`. All durations are in
seconds.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from casetree.exceptions import DeclarationError


class SequenceConfig(BaseModel):
    """Ordering settings applied when collection starts.

    `shuffle` is copied onto the default suite; `seed` is only carried here
    for the execution engine, which shuffles with it.
    """

    model_config = ConfigDict(extra="forbid")

    shuffle: bool = False
    seed: int | None = None


class RunnerConfig(BaseModel):
    """Defaults a runner supplies when a declaration does not."""

    model_config = ConfigDict(extra="forbid")

    test_timeout: float = Field(default=5.0, ge=0)
    hook_timeout: float = Field(default=10.0, ge=0)
    sequence: SequenceConfig = Field(default_factory=SequenceConfig)

    @classmethod
    def from_dict(cls, config: Mapping[str, Any]) -> RunnerConfig:
        """Create from a mapping, keeping defaults for missing keys.

        Params:
            config: Partial configuration, e.g. `{"test_timeout": 2}`

        Returns:
            Validated `RunnerConfig`

        Raises:
            pydantic.ValidationError: If a value has the wrong type or range
        """
        return cls.model_validate(dict(config))

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> RunnerConfig:
        """Create from a YAML file.

        Example YAML:
            test_timeout: 2.5
            sequence:
              shuffle: true
        """
        path = Path(yaml_path)
        with path.open() as f:
            config = yaml.safe_load(f) or {}

        return cls.from_dict(config)


class TaskOptions(BaseModel):
    """Per-declaration options: `timeout` (seconds), `retry`, `repeats`."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    timeout: float | None = Field(default=None, ge=0)
    retry: int | None = Field(default=None, ge=0)
    repeats: int | None = Field(default=None, ge=0)

    @classmethod
    def coerce(
        cls, options: TaskOptions | Mapping[str, Any] | float | None, subject: str = "options"
    ) -> TaskOptions:
        """Normalize the option forms accepted by declaration calls.

        A bare number is a timeout, so `5` is equivalent to `{"timeout": 5}`.

        Params:
            options: `None`, a number, a mapping, or a `TaskOptions`
            subject: Label used in error messages

        Returns:
            A `TaskOptions` instance

        Raises:
            DeclarationError: If the options cannot be interpreted
        """
        if options is None:
            return cls()
        if isinstance(options, TaskOptions):
            return options
        if isinstance(options, bool):
            raise DeclarationError(subject, "options must be a number or a mapping, got bool")
        if isinstance(options, (int, float)):
            options = {"timeout": options}
        if not isinstance(options, Mapping):
            raise DeclarationError(
                subject,
                f"options must be a number or a mapping, got {type(options).__name__}",
            )
        try:
            return cls.model_validate(dict(options))
        except ValidationError as e:
            raise DeclarationError(subject, str(e)) from e
