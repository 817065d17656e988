"""Tests for chat entry collection"""

from datetime import datetime, timedelta, timezone

import pytest

from roulette_system.entries import EntryCollector

START = datetime(2024, 5, 1, 20, 0, tzinfo=timezone.utc)


def test_keyword_matching():
    collector = EntryCollector(keyword="!Enter")

    assert collector.matches_keyword("!enter")
    assert collector.matches_keyword("  !ENTER please ")
    assert not collector.matches_keyword("!entering")
    assert not collector.matches_keyword("hello !enter")
    assert not collector.matches_keyword("")


def test_keyword_entry_once_per_user():
    collector = EntryCollector(keyword="!enter")

    assert collector.process_message("Viewer", "!enter", kick_user_id=11)
    assert not collector.process_message("viewer", "!enter")
    assert not collector.process_message("other", "hi chat")
    assert len(collector) == 1


def test_multiple_entries_are_capped():
    collector = EntryCollector(keyword="!enter", allow_multiple_entries=True, max_entries_per_user=3)

    results = [collector.process_message("viewer", "!enter") for _ in range(5)]

    assert results == [True, True, True, False, False]
    assert collector.participants()[0].weight == 3


def test_verified_only_and_bonus():
    collector = EntryCollector(keyword="!enter", verified_only=True, verified_bonus_chances=2)

    assert not collector.process_message("anon", "!enter", is_verified=False)
    assert collector.process_message("verified", "!enter", is_verified=True)
    assert [p.weight for p in collector.participants()] == [3]


def test_participants_in_entry_order():
    collector = EntryCollector(keyword="!enter")
    collector.process_message("Zed", "!enter", kick_user_id=99, avatar_url="https://img/z.png")
    collector.process_message("Amy", "!enter")

    participants = collector.participants()
    assert [p.id for p in participants] == [99, "amy"]
    assert participants[0].display_name == "Zed"
    assert participants[0].avatar_url == "https://img/z.png"
    assert participants[1].metadata["entry_method"] == "keyword"


def test_active_chatter_qualifies_after_unique_messages():
    collector = EntryCollector(entry_method="active_chatter", messages_required=3, time_window_minutes=10)

    assert not collector.process_message("chatty", "hello", timestamp=START)
    assert not collector.process_message("chatty", "hello", timestamp=START + timedelta(minutes=1))
    assert not collector.process_message("chatty", "gl everyone", timestamp=START + timedelta(minutes=2))
    assert collector.process_message("chatty", "lets go", timestamp=START + timedelta(minutes=3))
    assert collector.participants()[0].metadata["entry_method"] == "active_chatter"


def test_active_chatter_window():
    collector = EntryCollector(entry_method="active_chatter", messages_required=3, time_window_minutes=10)

    for minutes, text in ((0, "one"), (11, "two"), (22, "three")):
        assert not collector.process_message("slow", text, timestamp=START + timedelta(minutes=minutes))
    assert len(collector) == 0


def test_remove_entry():
    collector = EntryCollector(keyword="!enter")
    collector.process_message("Viewer", "!enter")

    assert collector.remove_entry("VIEWER")
    assert not collector.remove_entry("viewer")
    assert collector.participants() == []


@pytest.mark.parametrize("kwargs", [
    {"entry_method": "raffle", "keyword": "!enter"},
    {"entry_method": "keyword"},
    {"keyword": "!enter", "max_entries_per_user": 0},
])
def test_invalid_collector_settings(kwargs):
    with pytest.raises(ValueError):
        EntryCollector(**kwargs)


def test_long_messages_with_same_prefix_are_distinct():
    collector = EntryCollector(entry_method="active_chatter", messages_required=2)
    prefix = "a" * 600

    assert not collector.process_message("chatty", prefix + " first", timestamp=START)
    assert collector.process_message("chatty", prefix + " second", timestamp=START + timedelta(minutes=1))

    assert [len(text) for text in collector.tracked_messages("CHATTY")] == [500, 500]
    assert collector.tracked_messages("nobody") == []
