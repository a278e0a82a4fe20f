import pytest

import diary
from state import DiaryState

NOW = 1_760_000_000
DAY = 24 * 60 * 60


def test_entry_mapping_from_contract_fields():
    entry = diary.to_entry("diary-1700000000123", {
        "name": "Day 1",
        "description": "Felt okay",
        "publicValue1": 7,
        "publicValue2": 0,
        "timestamp": 1_700_000_000,
        "creator": "0xabc",
        "isVerified": False,
        "decryptedValue": 0,
    })
    assert entry == {
        "id": 1700000000123,
        "businessId": "diary-1700000000123",
        "title": "Day 1",
        "content": "Felt okay",
        "mood": 7,
        "date": 1_700_000_000,
        "creator": "0xabc",
        "publicValue1": 7,
        "publicValue2": 0,
        "isVerified": False,
        "decryptedValue": 0,
    }


def test_entry_mapping_coerces_missing_numbers_to_zero():
    entry = diary.to_entry("diary-5", {"name": "x", "description": "y", "publicValue1": None,
                                       "decryptedValue": "n/a", "timestamp": 10})
    assert entry["mood"] == 0
    assert entry["decryptedValue"] == 0
    assert entry["isVerified"] is False


def test_entry_id_falls_back_to_clock_for_foreign_ids():
    assert diary.parse_entry_id("diary-42") == 42
    assert diary.parse_entry_id("something-else") > 1_600_000_000_000


def test_stats_empty():
    assert diary.compute_stats([], now=NOW) == {
        "totalEntries": 0, "verifiedEntries": 0, "avgMood": 0, "recentEntries": 0,
    }


def test_stats_average_and_verified():
    entries = [
        {"mood": 3, "isVerified": True, "date": NOW},
        {"mood": 8, "isVerified": False, "date": NOW},
        {"mood": 6, "isVerified": True, "date": NOW},
    ]
    stats = diary.compute_stats(entries, now=NOW)
    assert stats["totalEntries"] == 3
    assert stats["verifiedEntries"] == 2
    assert stats["avgMood"] == pytest.approx(17 / 3)


def test_recent_entries_only_counts_last_seven_days():
    entries = [
        {"mood": 5, "isVerified": False, "date": NOW - DAY},
        {"mood": 5, "isVerified": False, "date": NOW - 1000 * DAY},
    ]
    assert diary.compute_stats(entries, now=NOW)["recentEntries"] == 1


def test_load_data_replaces_list_and_stats(state, chain):
    chain.add_record("diary-1", mood=4, verified=True, decrypted=4)
    chain.add_record("diary-2", mood=8)
    assert diary.load_data(state, chain)
    assert [d["businessId"] for d in state.diaries] == ["diary-1", "diary-2"]
    assert state.stats["totalEntries"] == len(state.diaries)
    assert state.stats["verifiedEntries"] == 1
    assert state.stats["avgMood"] == pytest.approx(6)
    assert not state.is_refreshing
    assert not state.loading


def test_load_data_skips_bad_records(state, chain):
    chain.add_record("diary-1")
    chain.add_record("diary-2")
    chain.add_record("diary-3")
    chain.broken.add("diary-2")
    assert diary.load_data(state, chain)
    assert [d["businessId"] for d in state.diaries] == ["diary-1", "diary-3"]
    assert state.visible_status() is None


def test_load_data_id_failure_keeps_previous_list(state, chain):
    chain.add_record("diary-1", mood=9)
    diary.load_data(state, chain)
    before, before_stats = list(state.diaries), dict(state.stats)

    chain.add_record("diary-2")
    chain.ids_error = RuntimeError("rpc unavailable")
    assert not diary.load_data(state, chain)
    assert state.diaries == before
    assert state.stats == before_stats
    assert state.visible_status()["message"] == "Failed to load diaries"
    assert not state.is_refreshing


def test_load_data_is_idempotent(state, chain):
    chain.add_record("diary-1", mood=2, timestamp=NOW)
    chain.add_record("diary-2", mood=9, timestamp=NOW - 30 * DAY, verified=True, decrypted=9)
    diary.load_data(state, chain, now=NOW)
    first = (list(state.diaries), dict(state.stats))
    diary.load_data(state, chain, now=NOW)
    assert (state.diaries, state.stats) == first


def test_load_data_needs_connection(chain):
    s = DiaryState()
    chain.add_record("diary-1")
    assert not diary.load_data(s, chain)
    assert chain.calls == []


def test_mood_by_day_averages_per_day():
    base = 1_700_000_000
    chart = diary.mood_by_day([
        {"date": base, "mood": 4},
        {"date": base + 60, "mood": 8},
        {"date": base + 3 * DAY, "mood": 5},
    ])
    assert list(chart["mood"]) == [6, 5]
    assert diary.mood_by_day([]).empty
