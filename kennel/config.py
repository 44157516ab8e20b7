# kennel/config.py
from __future__ import annotations

from dataclasses import dataclass
import logging
import os

# Loads .env locally, but will NOT override variables already set by the host
from dotenv import load_dotenv

log = logging.getLogger(__name__)


def _normalize_env(v: str | None) -> str:
    """
    Returns 'dev' or 'prod' only.
    Defaults to 'prod' if unset/unknown.
    """
    s = (v or "").strip().lower()
    if s in ("dev", "development", "test", "testing"):
        return "dev"
    if s in ("prod", "production", "main", "live"):
        return "prod"
    return "prod"


def _env_flag(name: str, default: bool) -> bool:
    raw = (os.getenv(name) or "").strip().lower()
    if not raw:
        return default
    return raw in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    token: str
    env: str = "prod"  # dev or prod

    # ---------------- Bot / Commands ----------------
    command_prefix_dev: str = "!!"
    command_prefix_prod: str = "!"

    # ---------------- Triggers ----------------
    clone_trigger: str = "🐕 bark"
    teams_trigger: str = "teams"
    room_name_template: str = "{name}'s room"   # used for rooms and team categories
    team_text_name: str = "text"
    team_voice_name: str = "voice"

    # ---------------- Lifecycle rules ----------------
    rollback_on_failure: bool = True    # delete half-provisioned channels
    teardown_on_move: bool = False      # also clean up when a user moves out directly
    ignore_bots: bool = True

    delete_reason: str = "cleaning up"

    # ---------------- Logging ----------------
    log_level: str = "INFO"

    @property
    def command_prefix(self) -> str:
        return self.command_prefix_dev if self.env == "dev" else self.command_prefix_prod

    def room_name(self, display_name: str) -> str:
        return self.room_name_template.format(name=display_name)


def load_settings() -> Settings:
    load_dotenv(override=False)

    env = _normalize_env(os.getenv("KENNEL_ENV") or os.getenv("ENV"))
    log.debug("KENNEL_ENV=%s", env)

    # ---------- Token selection ----------
    # Priority:
    # 1) DISCORD_TOKEN_DEV / DISCORD_TOKEN_PROD depending on KENNEL_ENV
    # 2) BOT_TOKEN / DISCORD_TOKEN
    if env == "dev":
        token = os.getenv("DISCORD_TOKEN_DEV", "").strip()
    else:
        token = os.getenv("DISCORD_TOKEN_PROD", "").strip()

    if not token:
        token = os.getenv("BOT_TOKEN", "").strip() or os.getenv("DISCORD_TOKEN", "").strip()

    if not token:
        raise RuntimeError(
            "Missing bot token.\n"
            "Set BOT_TOKEN=..., or set KENNEL_ENV=dev|prod with "
            "DISCORD_TOKEN_DEV / DISCORD_TOKEN_PROD."
        )

    defaults = Settings(token=token)

    log_level = (os.getenv("KENNEL_LOG_LEVEL") or defaults.log_level).strip().upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise RuntimeError(
            f"Unknown KENNEL_LOG_LEVEL {log_level!r}.\n"
            "Use one of DEBUG, INFO, WARNING, ERROR, CRITICAL."
        )

    return Settings(
        token=token,
        env=env,
        command_prefix_dev=(os.getenv("KENNEL_PREFIX_DEV") or "").strip() or defaults.command_prefix_dev,
        command_prefix_prod=(os.getenv("KENNEL_PREFIX_PROD") or "").strip() or defaults.command_prefix_prod,
        clone_trigger=os.getenv("KENNEL_CLONE_TRIGGER") or defaults.clone_trigger,
        teams_trigger=os.getenv("KENNEL_TEAMS_TRIGGER") or defaults.teams_trigger,
        room_name_template=os.getenv("KENNEL_ROOM_NAME") or defaults.room_name_template,
        rollback_on_failure=_env_flag("KENNEL_ROLLBACK", defaults.rollback_on_failure),
        teardown_on_move=_env_flag("KENNEL_TEARDOWN_ON_MOVE", defaults.teardown_on_move),
        ignore_bots=_env_flag("KENNEL_IGNORE_BOTS", defaults.ignore_bots),
        log_level=log_level,
    )
