from questflow.core.settings import EngineConfig
from questflow.domain.models.QuestModel import Quest, QuestColor, QuestType


def _fields(issues):
    return {issue.field for issue in issues}


# ─────────────────────────────────────────────────────────────
# 1) Construction
# ─────────────────────────────────────────────────────────────
def test_new_quest_gets_identity_and_timestamps():
    q = Quest.new(QuestType.WIN_GAMES, "Win 5 games", 5, 3)
    assert q.quest_id
    assert q.created_at is not None and q.created_at == q.updated_at
    assert q.is_active is True


def test_with_remaining_returns_copy():
    q = Quest.new(QuestType.CAST_SPELLS, "Cast 20 spells", 20, 2)
    lower = q.with_remaining(4)
    assert lower.remaining == 4
    assert q.remaining == 20
    assert lower.quest_id == q.quest_id


def test_colors_are_stored_as_tuple():
    q = Quest("q1", QuestType.PLAY_COLORS, "Play red or green", 20, 3, [QuestColor.RED])
    assert q.colors == (QuestColor.RED,)


def test_completed_quest_is_not_active(quest_factory):
    assert quest_factory(remaining=0).is_active is False


# ─────────────────────────────────────────────────────────────
# 2) Validation
# ─────────────────────────────────────────────────────────────
def test_valid_quest_has_no_issues(quest_factory):
    assert quest_factory().validate_quest() == []


def test_remaining_bounds(quest_factory):
    assert _fields(quest_factory(remaining=-1).validate_quest()) == {"remaining"}
    assert _fields(quest_factory(remaining=101).validate_quest()) == {"remaining"}
    assert quest_factory(remaining=100).validate_quest() == []


def test_remaining_must_be_whole(quest_factory):
    issues = quest_factory(remaining=2.5).validate_quest()
    assert [i.message for i in issues] == ["Remaining count must be a whole number"]


def test_expiry_bounds(quest_factory):
    assert _fields(quest_factory(expires_in_days=8).validate_quest()) == {"expires_in_days"}
    assert _fields(quest_factory(expires_in_days=-1).validate_quest()) == {"expires_in_days"}
    assert quest_factory(expires_in_days=0).validate_quest() == []


def test_description_rules(quest_factory):
    assert _fields(quest_factory(description="   ").validate_quest()) == {"description"}
    assert _fields(quest_factory(description="x" * 201).validate_quest()) == {"description"}


def test_color_rules(quest_factory):
    dupes = quest_factory(
        quest_type=QuestType.PLAY_COLORS, colors=(QuestColor.RED, QuestColor.RED)
    ).validate_quest()
    assert [i.message for i in dupes] == ["Colors must be unique"]

    bare = quest_factory(quest_type=QuestType.PLAY_COLORS).validate_quest()
    assert _fields(bare) == {"colors"}


def test_only_color_quests_name_colors(quest_factory):
    for quest_type in (QuestType.WIN_GAMES, QuestType.CAST_SPELLS):
        issues = quest_factory(quest_type=quest_type, colors=(QuestColor.BLUE,)).validate_quest()
        assert [i.message for i in issues] == ["Only color quests can name colors"]

    colored = quest_factory(quest_type=QuestType.PLAY_COLORS, colors=(QuestColor.BLUE,))
    assert colored.validate_quest() == []


def test_invalid_type_tag_is_reported(quest_factory):
    issues = quest_factory(quest_type="spells").validate_quest()
    assert _fields(issues) == {"quest_type"}


def test_prefix_and_config_are_applied(quest_factory):
    tight = EngineConfig(max_quest_remaining=10)
    issues = quest_factory(remaining=11).validate_quest(tight, prefix="quests[2].")
    assert _fields(issues) == {"quests[2].remaining"}
    assert "10" in issues[0].message
