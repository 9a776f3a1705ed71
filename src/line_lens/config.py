"""Configuration for blame annotations and the diff panel."""

import os
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

ENV_PREFIX = "LINE_LENS_"


class DisplayConfig(BaseModel):
    """The part of the configuration the annotation formatter needs."""

    model_config = ConfigDict(frozen=True)

    template: str
    date_format: str
    max_msg_len: int = Field(ge=0)
    style: str


class LensConfig(BaseModel):
    """All user options, with defaults.

    Instances are immutable. Reconfiguring produces a new instance through
    `merged`, which lays the new options over the current ones.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    # How long the annotation stays visible (ms)
    show_time: int = Field(default=3000, ge=0)
    # Rich style used to draw the annotation
    hl_group: str = "italic #888888"
    # Placeholders: %a author, %d date, %m summary, %h short hash
    format: str = " %a | %d | %m (%h)"
    # strftime format for the author date
    date_format: str = "%Y-%m-%d %H:%M"
    max_msg_len: int = Field(default=50, ge=0)
    auto_show: bool = True
    # Dwell time before the annotation is shown automatically (ms)
    auto_show_delay: int = Field(default=1000, ge=0)
    # Applied to every git invocation (ms)
    git_cmd_timeout: int = Field(default=5000, gt=0)
    show_diff: bool = True
    # 0 means size the diff panel from its content
    diff_window_width: int = Field(default=0, ge=0)
    diff_window_height: int = Field(default=0, ge=0)
    diff_window_border: str = "round"

    @property
    def display(self) -> DisplayConfig:
        return DisplayConfig(
            template=self.format,
            date_format=self.date_format,
            max_msg_len=self.max_msg_len,
            style=self.hl_group,
        )

    def merged(self, options: Mapping[str, Any] | None = None) -> "LensConfig":
        """Return a new config with `options` laid over this one.

        Options that are None are skipped so that unset CLI flags do not
        clobber earlier values.
        """
        if not options:
            return self
        data = self.model_dump()
        data.update({k: v for k, v in options.items() if v is not None})
        return LensConfig.model_validate(data)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "LensConfig":
        """Build a config from LINE_LENS_<OPTION> environment variables."""
        if environ is None:
            environ = os.environ

        options = {}
        for name in cls.model_fields:
            value = environ.get(ENV_PREFIX + name.upper())
            if value is not None:
                options[name] = value

        return cls().merged(options)
