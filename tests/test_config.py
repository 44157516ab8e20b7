import pytest

from kennel import config
from kennel.config import Settings, load_settings

ENV_KEYS = [
    "KENNEL_ENV", "ENV", "DISCORD_TOKEN_DEV", "DISCORD_TOKEN_PROD", "BOT_TOKEN", "DISCORD_TOKEN",
    "KENNEL_PREFIX_DEV", "KENNEL_PREFIX_PROD", "KENNEL_CLONE_TRIGGER", "KENNEL_TEAMS_TRIGGER",
    "KENNEL_ROOM_NAME", "KENNEL_ROLLBACK", "KENNEL_TEARDOWN_ON_MOVE", "KENNEL_IGNORE_BOTS",
    "KENNEL_LOG_LEVEL",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    # never pick up a developer's local .env
    monkeypatch.setattr(config, "load_dotenv", lambda **kwargs: False)


def test_missing_token_is_fatal():
    with pytest.raises(RuntimeError, match="Missing bot token"):
        load_settings()


def test_bot_token_and_defaults(monkeypatch):
    monkeypatch.setenv("BOT_TOKEN", " abc ")

    s = load_settings()

    assert s.token == "abc"
    assert s.env == "prod"
    assert s.command_prefix == "!"
    assert s.clone_trigger == "🐕 bark"
    assert s.teams_trigger == "teams"
    assert s.rollback_on_failure is True
    assert s.teardown_on_move is False
    assert s.ignore_bots is True


def test_dev_env_prefers_dev_token(monkeypatch):
    monkeypatch.setenv("KENNEL_ENV", "development")
    monkeypatch.setenv("DISCORD_TOKEN_DEV", "dev-token")
    monkeypatch.setenv("BOT_TOKEN", "fallback")

    s = load_settings()

    assert s.env == "dev"
    assert s.token == "dev-token"
    assert s.command_prefix == "!!"


def test_overrides(monkeypatch):
    monkeypatch.setenv("DISCORD_TOKEN", "t")
    monkeypatch.setenv("KENNEL_CLONE_TRIGGER", "➕ new room")
    monkeypatch.setenv("KENNEL_TEAMS_TRIGGER", "squads")
    monkeypatch.setenv("KENNEL_ROLLBACK", "0")
    monkeypatch.setenv("KENNEL_TEARDOWN_ON_MOVE", "yes")
    monkeypatch.setenv("KENNEL_LOG_LEVEL", "debug")

    s = load_settings()

    assert s.clone_trigger == "➕ new room"
    assert s.teams_trigger == "squads"
    assert s.rollback_on_failure is False
    assert s.teardown_on_move is True
    assert s.log_level == "DEBUG"


def test_room_name_template():
    s = Settings(token="t", room_name_template="🔊 {name}")
    assert s.room_name("milk") == "🔊 milk"
    assert Settings(token="t").room_name("milk") == "milk's room"


def test_unknown_log_level_is_fatal(monkeypatch):
    monkeypatch.setenv("BOT_TOKEN", "t")
    monkeypatch.setenv("KENNEL_LOG_LEVEL", "verbose")

    with pytest.raises(RuntimeError, match="KENNEL_LOG_LEVEL"):
        load_settings()


def test_main_exits_on_unknown_log_level(monkeypatch):
    from kennel import main as entry

    monkeypatch.setenv("BOT_TOKEN", "t")
    monkeypatch.setenv("KENNEL_LOG_LEVEL", "verbose")

    with pytest.raises(SystemExit) as exc:
        entry.main()

    assert exc.value.code == 1
