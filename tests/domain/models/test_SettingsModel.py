from questflow.domain.models.QueueModel import QueueType
from questflow.domain.models.SettingsModel import UserSettings, create_default_settings


def test_defaults_are_valid_and_allow_every_queue():
    settings = create_default_settings()
    assert settings.default_win_rate == 0.5
    assert settings.preferred_queues == ()
    assert settings.minutes_per_game == 8
    assert settings.validate_settings() == []


def test_win_rate_outside_range():
    issues = UserSettings(default_win_rate=0.9).validate_settings()
    assert [i.field for i in issues] == ["settings.default_win_rate"]


def test_duplicate_preferred_queues():
    settings = UserSettings(
        preferred_queues=[QueueType.STANDARD_BO1, QueueType.STANDARD_BO1]
    )
    assert settings.preferred_queues == (QueueType.STANDARD_BO1, QueueType.STANDARD_BO1)
    issues = settings.validate_settings()
    assert [i.message for i in issues] == ["Preferred queues must be unique"]


def test_unknown_preferred_queue():
    issues = UserSettings(preferred_queues=("arena_open",)).validate_settings()
    assert [i.message for i in issues] == ["Invalid queue type"]


def test_minutes_per_game_range():
    assert UserSettings(minutes_per_game=2).validate_settings()
    assert UserSettings(minutes_per_game=31).validate_settings()
    assert UserSettings(minutes_per_game=30).validate_settings() == []
