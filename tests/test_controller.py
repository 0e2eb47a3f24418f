"""Property-based tests for the dashboard controller.

**Feature: trade-journal**
"""

import itertools
import logging
from unittest.mock import MagicMock

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from tradejournal.dashboard import DashboardController
from tradejournal.errors import (
    ReadOnlyRecordError,
    RecordNotFoundError,
    StoreError,
    TradeJournalError,
)
from tradejournal.models import (
    Emotion,
    FilterSpec,
    FormOpen,
    Idle,
    OverlayOpen,
    TradeRecord,
    Visibility,
    emotion_color,
    emotion_emoji,
)
from tradejournal.stores import InMemoryTradeStore

from tests.strategies import make_record, record_list_strategy


def _counter_ids():
    counter = itertools.count(1)
    return lambda: f"new{next(counter):04d}"


def _seeded_store(private: list[TradeRecord], public: list[TradeRecord] = (), user_id: str = "alice"):
    store = InMemoryTradeStore(id_factory=_counter_ids())
    for record in private:
        store.put(user_id, record)
    for record in public:
        store.publish(record)
    return store


def _loaded(private, public=(), user_id="alice") -> DashboardController:
    controller = DashboardController(_seeded_store(private, public, user_id), user_id)
    controller.load()
    return controller


class TestLoadMerge:
    """
    **Feature: trade-journal, Property: Private-then-Public Merge**

    *For any* private and public record sets, load yields the private
    records followed by the public ones, each in store order.
    """

    @given(private=record_list_strategy(max_size=15), public=record_list_strategy(max_size=15))
    @settings(max_examples=50)
    def test_private_first_then_public(self, private, public):
        controller = _loaded(private, public)

        ids = [(r.visibility, r.id) for r in controller.records]
        expected = [(Visibility.PRIVATE, r.id) for r in private] + [
            (Visibility.PUBLIC, r.id) for r in public
        ]
        assert ids == expected
        assert controller.loading is False

    def test_same_id_in_both_collections_kept(self):
        controller = _loaded([make_record(id="dup", symbol="EURUSD")], [make_record(id="dup", symbol="GBPUSD")])

        assert [r.key for r in controller.records] == [
            (Visibility.PRIVATE, "dup"),
            (Visibility.PUBLIC, "dup"),
        ]
        assert controller.find("dup").symbol == "EURUSD"
        assert controller.find("dup", Visibility.PUBLIC).symbol == "GBPUSD"

    def test_loading_until_first_load(self):
        controller = DashboardController(_seeded_store([make_record(id="a")]), "alice")
        assert controller.loading is True
        assert controller.records == []

        controller.load()
        controller.apply_filters(FilterSpec(symbols=["EURUSD"]))
        controller.create_record({"symbol": "EURUSD"}, Emotion.HAPPY)

        assert controller.loading is False

    def test_undated_documents_are_loaded(self):
        tree = {
            "users": {"alice": {"privateTrades": {
                "a": {"emotion": "happy", "symbol": "EURUSD", "date": "15-06-2023"},
                "b": {"emotion": "sad", "symbol": "EURUSD"},
                "c": {"emotion": "neutral", "symbol": "EURUSD", "date": None},
            }}},
        }
        controller = DashboardController(InMemoryTradeStore(tree), "alice")
        controller.load()

        assert [r.id for r in controller.apply_filters(FilterSpec())] == ["a", "b", "c"]
        assert [r.id for r in controller.apply_filters(FilterSpec(symbols=["EURUSD"]))] == ["a", "b", "c"]

        june = FilterSpec.model_validate({"dateRange": {"startDate": "01-06-2023", "endDate": "30-06-2023"}})
        assert [r.id for r in controller.apply_filters(june)] == ["a"]

    def test_no_user_does_not_load(self):
        store = MagicMock()
        controller = DashboardController(store, None)

        assert controller.load() == []
        assert controller.loading is True
        store.fetch_private.assert_not_called()

    def test_fetch_error_leaves_list_empty(self, caplog):
        store = MagicMock()
        store.fetch_private.return_value = {"a": make_record(id="a")}
        store.fetch_public.side_effect = StoreError("connection lost")
        controller = DashboardController(store, "alice")

        with caplog.at_level(logging.ERROR, logger="tradejournal"):
            records = controller.load()

        assert records == []
        assert controller.loading is False
        assert "Error fetching trades" in caplog.text


class TestFilteredView:
    """
    **Feature: trade-journal, Property: Filters Derive From Base List**

    *For any* sequence of filter specs, the base list is never narrowed,
    so clearing the filter restores every record.
    """

    @given(records=record_list_strategy(max_size=20))
    @settings(max_examples=50)
    def test_filters_do_not_mutate_base(self, records):
        controller = _loaded(records)

        controller.apply_filters(FilterSpec(symbols=["EURUSD"]))
        controller.apply_filters(FilterSpec(sessions=["London"]))
        restored = controller.apply_filters(FilterSpec())

        assert [r.id for r in restored] == [r.id for r in records]

    def test_apply_filters_accepts_mapping_and_sets_current(self):
        eur = make_record(id="a", symbol="EURUSD")
        gbp = make_record(id="b", symbol="GBPUSD")
        controller = _loaded([eur, gbp])

        result = controller.apply_filters({"symbols": ["GBPUSD"]})

        assert [r.id for r in result] == ["b"]
        assert [r.id for r in controller.visible_records()] == ["b"]

    def test_summary_over_visible_records(self):
        controller = _loaded([
            make_record(id="a", symbol="EURUSD", profit_loss="+100"),
            make_record(id="b", symbol="EURUSD", profit_loss="-40"),
            make_record(id="c", symbol="GBPUSD", profit_loss="+7"),
        ])
        controller.apply_filters(FilterSpec(symbols=["EURUSD"]))

        summary = controller.summary()

        assert summary["total_trades"] == 2
        assert summary["net_pnl"] == pytest.approx(60.0)
        assert summary["winning_trades"] == 1
        assert summary["losing_trades"] == 1
        assert summary["win_rate"] == pytest.approx(50.0)


class TestCreateRecord:
    """
    **Feature: trade-journal, Property: Create Prepends**

    *For any* base list, a created record appears first in the
    unfiltered view, carrying an id reserved from the store.
    """

    @given(records=record_list_strategy(max_size=15), emotion=st.sampled_from(list(Emotion)))
    @settings(max_examples=50)
    def test_new_record_first(self, records, emotion):
        controller = _loaded(records)

        record = controller.create_record({"symbol": "XAUUSD", "date": "15-06-2023"}, emotion)
        view = controller.apply_filters(FilterSpec())

        assert view[0] == record
        assert record.id.startswith("new")
        assert record.color == emotion_color(emotion)
        assert record.emoji == emotion_emoji(emotion)
        assert len(view) == len(records) + 1

    def test_create_persists(self):
        store = _seeded_store([])
        controller = DashboardController(store, "alice")
        controller.load()

        record = controller.create_record({"symbol": "EURUSD", "tags": ["news"]}, "😎")

        stored = store.fetch_private("alice")[record.id]
        assert stored == record
        assert stored.emotion is Emotion.CONFIDENT

    def test_create_defaults_date_to_today(self):
        from datetime import date

        from tradejournal.models import format_trade_date

        controller = _loaded([])
        record = controller.create_record({"symbol": "EURUSD"}, Emotion.HAPPY)

        assert record.date == format_trade_date(date.today())

    def test_form_cannot_set_id_or_style(self):
        controller = _loaded([])
        record = controller.create_record(
            {"id": "forced", "color": "#000", "emoji": "?", "symbol": "EURUSD"},
            Emotion.SAD,
        )

        assert record.id != "forced"
        assert record.color == emotion_color(Emotion.SAD)

    def test_failed_write_keeps_local_record(self, caplog):
        store = MagicMock()
        store.fetch_private.return_value = {}
        store.fetch_public.return_value = {}
        store.reserve_id.return_value = "r1"
        store.put.side_effect = StoreError("write rejected")
        controller = DashboardController(store, "alice")
        controller.load()

        with caplog.at_level(logging.ERROR, logger="tradejournal"):
            record = controller.create_record({"symbol": "EURUSD"}, Emotion.HAPPY)

        assert controller.records == [record]
        assert record.id == "r1"
        assert "Failed to create trade" in caplog.text

    def test_create_requires_user(self):
        controller = DashboardController(MagicMock(), None)
        with pytest.raises(TradeJournalError):
            controller.create_record({"symbol": "EURUSD"}, Emotion.HAPPY)


class TestDeleteRecord:
    """
    **Feature: trade-journal, Property: Delete Removes Exactly One**

    *For any* base list and chosen id, deleting removes exactly that
    record and keeps the others in their relative order.
    """

    @given(records=record_list_strategy(min_size=1, max_size=20), data=st.data())
    @settings(max_examples=100)
    def test_delete_exactly_one(self, records, data):
        controller = _loaded(records)
        target = data.draw(st.sampled_from(records))

        controller.delete_record(target.id)

        assert [r.id for r in controller.records] == [r.id for r in records if r.id != target.id]

    def test_delete_removes_from_store(self):
        store = _seeded_store([make_record(id="a"), make_record(id="b")])
        controller = DashboardController(store, "alice")
        controller.load()

        controller.delete_record("a")

        assert list(store.fetch_private("alice")) == ["b"]

    def test_delete_unknown_raises(self):
        controller = _loaded([make_record(id="a")])
        with pytest.raises(RecordNotFoundError):
            controller.delete_record("missing")

    def test_delete_public_raises(self):
        controller = _loaded([], [make_record(id="p")])
        with pytest.raises(ReadOnlyRecordError):
            controller.delete_record("p")
        assert len(controller.records) == 1

    def test_failed_remote_delete_still_removes_locally(self, caplog):
        store = MagicMock()
        store.fetch_private.return_value = {"a": make_record(id="a")}
        store.fetch_public.return_value = {}
        store.delete.side_effect = StoreError("offline")
        controller = DashboardController(store, "alice")
        controller.load()

        with caplog.at_level(logging.ERROR, logger="tradejournal"):
            controller.delete_record("a")

        assert controller.records == []
        assert "Failed to delete trade" in caplog.text

    def test_delete_closes_overlay_of_deleted_record(self):
        controller = _loaded([make_record(id="a"), make_record(id="b")])
        controller.select_for_overlay(controller.find("a"))

        controller.delete_record("a")

        assert controller.view == Idle()


class TestUpdateRecord:
    """
    **Feature: trade-journal, Property: Update Preserves Identity**

    *For any* update payload, the record keeps its id, its position, and
    every field absent from the payload.
    """

    @given(
        records=record_list_strategy(min_size=1, max_size=15),
        data=st.data(),
        profit_loss=st.integers(min_value=-999, max_value=999).map(str),
    )
    @settings(max_examples=100)
    def test_update_preserves_id_and_other_fields(self, records, data, profit_loss):
        controller = _loaded(records)
        target = data.draw(st.sampled_from(records))

        updated = controller.update_record(target, {"profit_loss": profit_loss})

        assert updated.id == target.id
        assert updated.profit_loss == profit_loss
        assert updated.model_dump(exclude={"profit_loss"}) == target.model_dump(exclude={"profit_loss"})
        assert [r.id for r in controller.records] == [r.id for r in records]
        assert controller.find(target.id) == updated

    def test_remote_update_sends_only_touched_keys(self):
        store = MagicMock()
        store.fetch_private.return_value = {"a": make_record(id="a", symbol="EURUSD")}
        store.fetch_public.return_value = {}
        controller = DashboardController(store, "alice")
        controller.load()

        controller.update_record("a", {"profit_loss": "+12", "emotion": "greedy"})

        store.update.assert_called_once_with("alice", "a", {
            "profitLoss": "+12",
            "emotion": "greedy",
            "color": emotion_color(Emotion.GREEDY),
            "emoji": emotion_emoji(Emotion.GREEDY),
        })

    def test_update_persists_to_store(self):
        store = _seeded_store([make_record(id="a", symbol="EURUSD", session="London")])
        controller = DashboardController(store, "alice")
        controller.load()

        controller.update_record("a", {"session": "Asia"})

        stored = store.fetch_private("alice")["a"]
        assert stored.session == "Asia"
        assert stored.symbol == "EURUSD"

    def test_update_public_raises(self):
        controller = _loaded([], [make_record(id="p")])
        with pytest.raises(ReadOnlyRecordError):
            controller.update_record("p", {"symbol": "EURUSD"})

    def test_failed_remote_update_keeps_local_change(self, caplog):
        store = MagicMock()
        store.fetch_private.return_value = {"a": make_record(id="a")}
        store.fetch_public.return_value = {}
        store.update.side_effect = StoreError("offline")
        controller = DashboardController(store, "alice")
        controller.load()

        with caplog.at_level(logging.ERROR, logger="tradejournal"):
            controller.update_record("a", {"reason": "news spike"})

        assert controller.find("a").reason == "news spike"
        assert "Failed to update trade" in caplog.text


class TestViewState:
    """
    **Feature: trade-journal, Property: Single View State**

    The form and the overlay are variants of one value, so opening one
    replaces the other.
    """

    def test_create_flow(self):
        controller = _loaded([])

        view = controller.select_for_create("anxious")
        assert view == FormOpen(emotion=Emotion.ANXIOUS)

        record = controller.save_form({"symbol": "GBPUSD", "date": "15-06-2023"})

        assert controller.view == Idle()
        assert record.emotion is Emotion.ANXIOUS
        assert controller.records[0] == record

    def test_edit_flow(self):
        controller = _loaded([make_record(id="a", emotion=Emotion.SAD, symbol="EURUSD")])

        controller.select_for_edit(controller.find("a"))
        assert controller.view == FormOpen(emotion=Emotion.SAD, editing_id="a")
        assert controller.editing_record().id == "a"

        record = controller.save_form({"reason": "revenge trade"})

        assert controller.view == Idle()
        assert record.id == "a"
        assert record.reason == "revenge trade"
        assert len(controller.records) == 1

    def test_overlay_replaces_form(self):
        controller = _loaded([make_record(id="a")], [make_record(id="p")])
        controller.select_for_create(Emotion.HAPPY)

        controller.select_for_overlay(controller.find("p", Visibility.PUBLIC))

        assert controller.view == OverlayOpen(record_id="p", visibility=Visibility.PUBLIC)
        assert controller.overlay_record().is_public
        assert controller.editing_record() is None

    def test_close(self):
        controller = _loaded([make_record(id="a")])
        controller.select_for_overlay(controller.find("a"))

        assert controller.close() == Idle()
        assert controller.overlay_record() is None

    def test_save_without_form_raises(self):
        controller = _loaded([])
        with pytest.raises(TradeJournalError):
            controller.save_form({"symbol": "EURUSD"})

    def test_cannot_edit_public(self):
        controller = _loaded([], [make_record(id="p")])
        with pytest.raises(ReadOnlyRecordError):
            controller.select_for_edit(controller.find("p"))
        assert controller.view == Idle()


class TestPublishRecord:
    """Sharing a private record publicly."""

    def test_publish_adds_public_copy(self):
        store = _seeded_store([make_record(id="a", symbol="EURUSD")])
        controller = DashboardController(store, "alice")
        controller.load()

        published = controller.publish_record("a")

        assert published.is_public
        assert published.id != "a"
        assert controller.records[-1] == published
        assert store.fetch_public()[published.id].symbol == "EURUSD"
        assert controller.find("a").visibility is Visibility.PRIVATE
