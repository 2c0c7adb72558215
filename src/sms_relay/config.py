from __future__ import annotations

import os
import sys
from collections.abc import Mapping
from functools import lru_cache
from pathlib import Path

from pydantic import BaseModel

REQUIRED_ENV_VARS: tuple[str, ...] = (
    "TWILIO_ACCOUNT_SID",
    "TWILIO_AUTH_TOKEN",
    "TWILIO_PHONE_NUMBER",
)

DEFAULT_PORT = 3000


class ConfigError(Exception):
    pass


# Front-end assets ship inside the package; PUBLIC_DIR overrides them.
PACKAGE_PUBLIC_DIR = Path(__file__).resolve().parent / "public"


class Settings(BaseModel):
    # --- Twilio credentials (all required) ---
    account_sid: str = ""
    auth_token: str = ""
    phone_number: str = ""

    # --- HTTP server ---
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    public_dir: Path = PACKAGE_PUBLIC_DIR

    # --- Logging ---
    log_level: str = "INFO"
    log_format: str = "text"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        """
        Build settings from the process environment (or any mapping).

        Empty strings are kept as-is so that `missing()` can report them.
        Raises ConfigError if PORT is not an integer.
        """
        env = os.environ if environ is None else environ

        port_raw = env.get("PORT") or str(DEFAULT_PORT)
        try:
            port = int(port_raw)
        except ValueError:
            raise ConfigError(f"Invalid PORT={port_raw!r}. Must be an integer.") from None

        public_dir = env.get("PUBLIC_DIR")
        return cls(
            account_sid=env.get("TWILIO_ACCOUNT_SID", ""),
            auth_token=env.get("TWILIO_AUTH_TOKEN", ""),
            phone_number=env.get("TWILIO_PHONE_NUMBER", ""),
            host=env.get("HOST") or "0.0.0.0",
            port=port,
            public_dir=Path(public_dir) if public_dir else PACKAGE_PUBLIC_DIR,
            log_level=(env.get("LOG_LEVEL") or "INFO").upper(),
            log_format=(env.get("LOG_FORMAT") or "text").lower(),
        )

    def missing(self) -> list[str]:
        values = {
            "TWILIO_ACCOUNT_SID": self.account_sid,
            "TWILIO_AUTH_TOKEN": self.auth_token,
            "TWILIO_PHONE_NUMBER": self.phone_number,
        }
        return [name for name in REQUIRED_ENV_VARS if not values[name]]


def load_settings_or_exit(environ: Mapping[str, str] | None = None) -> Settings:
    """
    Load settings and terminate the process if they are unusable.

    Missing Twilio credentials (or a malformed PORT) are fatal: a diagnostic
    goes to stderr and the process exits with status 1, before any listener
    is opened.
    """
    try:
        settings = Settings.from_env(environ)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(1) from e

    missing = settings.missing()
    if missing:
        print(
            f"Error: Twilio credentials ({', '.join(missing)}) are not set "
            "in the environment or .env file.",
            file=sys.stderr,
        )
        raise SystemExit(1)

    return settings


@lru_cache
def get_settings() -> Settings:
    return load_settings_or_exit()
