from __future__ import annotations

import json
import logging

import pytest

from questflow.domain.models.QueueModel import QueueType
from questflow.infra import reward_tables
from questflow.infra.reward_tables import (
	RewardTableError,
	load_reward_model,
	parse_reward_tables,
)


def _doc(**overrides):
	doc = {
		"version": "test-1",
		"default_queue": "standard_bo1",
		"queues": {
			"standard_bo1": {
				"entry_cost": 0,
				"primary_rewards": [0, 10, 20],
				"average_game_minutes": 8,
				"progress_multiplier": {"win": 1.0},
			},
		},
	}
	doc.update(overrides)
	return doc


def test_bundled_table_loads() -> None:
	model = load_reward_model()

	assert model.version == "2024.1"
	assert model.default_queue is QueueType.STANDARD_BO1
	assert set(model.queues()) == set(QueueType)
	assert model.lookup(QueueType.QUICK_DRAFT).entry_cost == 5000


def test_unknown_queue_keys_are_skipped(caplog) -> None:
	doc = _doc()
	doc["queues"]["arena_open"] = {"entry_cost": 0, "primary_rewards": [1], "average_game_minutes": 5}

	with caplog.at_level(logging.WARNING, logger="questflow.infra.reward_tables"):
		model = parse_reward_tables(doc)

	assert model.queues() == [QueueType.STANDARD_BO1]
	assert "arena_open" in caplog.text


def test_missing_default_falls_back_to_first_queue() -> None:
	model = parse_reward_tables(_doc(default_queue="quick_draft"))
	assert model.default_queue is QueueType.STANDARD_BO1


@pytest.mark.parametrize(
	"doc",
	[
		_doc(version=""),
		_doc(queues={}),
		_doc(queues={"arena_open": {}}),
		_doc(queues={"standard_bo1": []}),
		_doc(queues={"standard_bo1": {"entry_cost": -5, "primary_rewards": [0], "average_game_minutes": 8}}),
		_doc(queues={"standard_bo1": {"entry_cost": 0, "primary_rewards": [0], "average_game_minutes": 0}}),
	],
)
def test_broken_documents_raise(doc) -> None:
	with pytest.raises(RewardTableError):
		parse_reward_tables(doc)


def test_load_from_path(tmp_path) -> None:
	path = tmp_path / "tables.json"
	path.write_text(json.dumps(_doc()), encoding="utf-8")

	model = load_reward_model(str(path))

	assert model.version == "test-1"
	assert model.lookup("standard_bo3").queue is QueueType.STANDARD_BO1


def test_unreadable_sources_raise(tmp_path) -> None:
	with pytest.raises(RewardTableError):
		load_reward_model(str(tmp_path / "missing.json"))

	bad = tmp_path / "bad.json"
	bad.write_text("{not json", encoding="utf-8")
	with pytest.raises(RewardTableError):
		load_reward_model(str(bad))


def test_configured_path_is_used(tmp_path, monkeypatch) -> None:
	path = tmp_path / "tables.json"
	path.write_text(json.dumps(_doc(version="env-table")), encoding="utf-8")
	monkeypatch.setenv("QUESTFLOW_REWARD_TABLES", str(path))
	reward_tables.get_reward_model.cache_clear()
	try:
		assert reward_tables.get_reward_model().version == "env-table"
	finally:
		reward_tables.get_reward_model.cache_clear()
