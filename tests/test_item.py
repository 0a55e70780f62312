from destill.cards import TriageCard
from destill.tui.item import Item


def _card(**kwargs):
    defaults = dict(normalized_msg="Test failed", job_name="tests")
    defaults.update(kwargs)
    return TriageCard(**defaults)


def test_filter_value_and_title_use_normalized_message():
    item = Item(_card())
    assert item.filter_value() == "Test failed"
    assert item.title() == "Test failed"


def test_description_is_job_name():
    assert Item(_card()).description() == "tests"


def test_recurrence_reads_card_metadata():
    item = Item(_card(metadata={"recurrence_count": "3"}))
    assert item.recurrence == 3


def test_recurrence_defaults_when_missing():
    item = Item(_card())
    assert item.recurrence == item.card.recurrence_count
    assert item.recurrence >= 1


def test_recurrence_follows_card_updates():
    item = Item(_card())
    before = item.recurrence
    item.card.recurrence_count = before + 1
    assert item.recurrence == before + 1


def test_context_lines_come_from_card():
    item = Item(_card(pre_context=["a", "b"], post_context=["c"]))
    assert item.pre_context == ["a", "b"]
    assert item.post_context == ["c"]


def test_rank_and_tier_are_kept():
    item = Item(_card(), rank=4, tier=3)
    assert (item.rank, item.tier) == (4, 3)