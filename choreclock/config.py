# File: config.py
"""Engine configuration.

EngineConfig is created once at startup and passed by reference to whatever
calls the engines. Each setting is resolved in priority order:

1. Explicit option (ConfigOptions dict)
2. Environment variable (TZ, TOUCH)
3. Default (UTC, touch mode off)

Nothing here is global: two configs with different zones can coexist.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
import os
from typing import TYPE_CHECKING, Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import voluptuous as vol

from . import const

if TYPE_CHECKING:
    from .type_defs import ConfigOptions

TOUCH_MODE_TRUE_VALUES = frozenset({"true", "1"})


def parse_touch_mode(value: Any) -> bool:
    """Interpret a touch-mode setting.

    Booleans pass through; strings are true only for "true" (any case) or "1".
    """
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in TOUCH_MODE_TRUE_VALUES


def resolve_time_zone(name: str | None) -> ZoneInfo:
    """Look up an IANA zone name, falling back to UTC with a warning."""
    if not name:
        return ZoneInfo(const.DEFAULT_TIME_ZONE_NAME)
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        const.LOGGER.warning(
            "Invalid time zone '%s', falling back to %s",
            name,
            const.DEFAULT_TIME_ZONE_NAME,
        )
        return ZoneInfo(const.DEFAULT_TIME_ZONE_NAME)


OPTIONS_SCHEMA = vol.Schema(
    {
        vol.Optional(const.CONF_TIME_ZONE): vol.All(str, vol.Strip),
        vol.Optional(const.CONF_TOUCH_MODE): parse_touch_mode,
    }
)


@dataclass(frozen=True)
class EngineConfig:
    """Resolved configuration shared by the engines and their callers.

    Attributes:
        time_zone: Zone used to interpret wall-clock schedule times
        touch_mode: Render buttons instead of links in touch-first views
    """

    time_zone: ZoneInfo = field(
        default_factory=lambda: ZoneInfo(const.DEFAULT_TIME_ZONE_NAME)
    )
    touch_mode: bool = const.DEFAULT_TOUCH_MODE

    @classmethod
    def from_options(
        cls,
        options: ConfigOptions | Mapping[str, Any] | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> EngineConfig:
        """Resolve a config from explicit options, then the environment.

        Args:
            options: Explicit settings, validated with OPTIONS_SCHEMA
            environ: Environment mapping (defaults to os.environ)

        Raises:
            vol.Invalid: If an explicit option has the wrong type.
        """
        validated = OPTIONS_SCHEMA(dict(options or {}))
        env = os.environ if environ is None else environ

        tz_name = validated.get(const.CONF_TIME_ZONE) or env.get(const.ENV_TIME_ZONE)
        time_zone = resolve_time_zone(tz_name)

        if const.CONF_TOUCH_MODE in validated:
            touch_mode = validated[const.CONF_TOUCH_MODE]
        elif const.ENV_TOUCH_MODE in env:
            touch_mode = parse_touch_mode(env[const.ENV_TOUCH_MODE])
        else:
            touch_mode = const.DEFAULT_TOUCH_MODE

        const.LOGGER.debug(
            "Engine config resolved: time_zone=%s touch_mode=%s", time_zone, touch_mode
        )
        return cls(time_zone=time_zone, touch_mode=touch_mode)
