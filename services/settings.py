# services/settings.py
from __future__ import annotations

import os
import logging
from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple

import pytz
from dotenv import load_dotenv

from services.exceptions import ConfigurationError


logger = logging.getLogger(__name__)

DEFAULT_API_BASE = "https://webapi2ui.ielightning.net"

EVENT_DATE_MODES = ("between", "after")
VISIBILITY_POLICIES = ("query", "recency")


def _split_ids(raw: Optional[str]) -> Tuple[str, ...]:
    return tuple(s.strip() for s in (raw or "").split(",") if s.strip())


def _int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = env.get(key)
    if raw is None or str(raw).strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{key} must be an integer, got {raw!r}")


def _float(env: Mapping[str, str], key: str, default: float) -> float:
    raw = env.get(key)
    if raw is None or str(raw).strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{key} must be a number, got {raw!r}")


def _choice(env: Mapping[str, str], key: str, choices: Tuple[str, ...]) -> str:
    value = (env.get(key) or choices[0]).strip().lower()
    if value not in choices:
        raise ConfigurationError(f"{key} must be one of {', '.join(choices)}, got {value!r}")
    return value


@dataclass(frozen=True)
class ChangeLogSettings:
    """
    Everything the change-log pipeline needs from the environment.

    Built once at startup and handed to the window calculator, report client
    and visibility filter. Credentials are kept out of the repr.
    """
    api_base: str = DEFAULT_API_BASE
    port: int = 5050
    office_ids: Tuple[str, ...] = ()
    job_type_ids: Tuple[str, ...] = ()
    page_size: int = 500
    event_days_back: int = 45
    prep_days_past: int = 30
    prep_days_future: int = 60
    report_timezone: Optional[str] = None
    event_date_mode: str = "between"
    visibility_policy: str = "query"
    request_timeout: float = 30.0
    auth_bearer: Optional[str] = field(default=None, repr=False)
    auth_cookie: Optional[str] = field(default=None, repr=False)

    def __post_init__(self):
        if self.event_date_mode not in EVENT_DATE_MODES:
            raise ConfigurationError(f"Unknown event date mode: {self.event_date_mode}")
        if self.visibility_policy not in VISIBILITY_POLICIES:
            raise ConfigurationError(f"Unknown visibility policy: {self.visibility_policy}")
        if self.page_size <= 0:
            raise ConfigurationError("PAGE_SIZE must be greater than 0")
        if self.report_timezone:
            try:
                pytz.timezone(self.report_timezone)
            except pytz.UnknownTimeZoneError:
                raise ConfigurationError(f"Unknown time zone: {self.report_timezone}")

    @property
    def tz(self):
        """The pytz zone for day boundaries, or None for host local time."""
        return pytz.timezone(self.report_timezone) if self.report_timezone else None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ChangeLogSettings":
        if environ is None:
            load_dotenv()
            environ = os.environ

        settings = cls(
            api_base=(environ.get("IE_API_BASE") or DEFAULT_API_BASE).rstrip("/"),
            port=_int(environ, "PORT", 5050),
            office_ids=_split_ids(environ.get("OFFICE_IDS")),
            job_type_ids=_split_ids(environ.get("JOB_TYPE_IDS")),
            page_size=_int(environ, "PAGE_SIZE", 500),
            event_days_back=_int(environ, "EVENT_DAYS_BACK", 45),
            prep_days_past=_int(environ, "PREP_DAYS_PAST", 30),
            prep_days_future=_int(environ, "PREP_DAYS_FUTURE", 60),
            report_timezone=(environ.get("REPORT_TIMEZONE") or "").strip() or None,
            event_date_mode=_choice(environ, "EVENT_DATE_MODE", EVENT_DATE_MODES),
            visibility_policy=_choice(environ, "VISIBILITY_POLICY", VISIBILITY_POLICIES),
            request_timeout=_float(environ, "REQUEST_TIMEOUT", 30.0),
            auth_bearer=environ.get("AUTH_BEARER") or None,
            auth_cookie=environ.get("AUTH_COOKIE") or None,
        )
        logger.debug("Loaded change log settings: %s", settings)
        return settings
