"""Unit tests for the preview/confirm import workflow."""

from unittest.mock import MagicMock

import pytest

from src.dictionary_exchange.core.session import ImportSession
from src.dictionary_exchange.models.changes import ChangeRecord, ChangeSet
from src.dictionary_exchange.models.dictionary import DictionaryItem, Language
from src.dictionary_exchange.models.options import ImportOptions
from src.dictionary_exchange.utils.exceptions import PersistenceError, StalePreviewError

EN = 1
FR = 2

DATA = b",English,French\r\ngreeting,,Bonjour\r\nbutton,Button,\r\n"


class TestImportSession:
    """Test ImportSession against the in-memory store."""

    def test_preview_does_not_persist(self, memory_store):
        session = ImportSession(memory_store)

        changes = session.preview(DATA, ImportOptions())

        assert list(changes) == [
            ChangeRecord("greeting", "French", "", "Bonjour"),
            ChangeRecord("button", "English", "", "Button"),
        ]
        assert memory_store.get_item("greeting").get_translation(FR) == ""
        assert memory_store.get_item("button").get_translation(EN) is None
        assert memory_store.save_count == 0

    def test_preview_is_repeatable(self, memory_store):
        session = ImportSession(memory_store)

        first = session.preview(DATA, ImportOptions())
        second = session.preview(DATA, ImportOptions())

        assert first == second

    def test_confirm_persists(self, memory_store):
        session = ImportSession(memory_store)

        changes = session.confirm(DATA, ImportOptions())

        assert len(changes) == 2
        assert memory_store.get_item("greeting").get_translation(FR) == "Bonjour"
        assert memory_store.get_item("button").get_translation(EN) == "Button"
        assert memory_store.save_count == 1

    def test_confirm_after_preview(self, memory_store):
        session = ImportSession(memory_store)
        preview = session.preview(DATA, ImportOptions())

        applied = session.confirm(DATA, ImportOptions(), expected=preview)

        assert applied == preview

    def test_second_confirm_is_empty(self, memory_store):
        session = ImportSession(memory_store)
        session.confirm(DATA, ImportOptions())

        again = session.confirm(DATA, ImportOptions())

        assert not again.has_changes

    def test_stale_preview_is_rejected(self, memory_store):
        session = ImportSession(memory_store)
        preview = session.preview(DATA, ImportOptions())

        # Another editor fills the same cell before the confirm request
        edited = memory_store.get_item("button")
        edited.set_translation(EN, "Push")
        memory_store.save_items([edited])

        with pytest.raises(StalePreviewError) as exc:
            session.confirm(DATA, ImportOptions(), expected=preview)

        assert exc.value.expected_count == 2
        assert exc.value.actual_count == 1
        assert memory_store.get_item("greeting").get_translation(FR) == ""

    def test_stale_preview_detects_changed_old_value(self, memory_store):
        data = b",English\r\ngreeting,Hi\r\n"
        session = ImportSession(memory_store)
        preview = session.preview(data, ImportOptions(override=True))

        edited = memory_store.get_item("greeting")
        edited.set_translation(EN, "Howdy")
        memory_store.save_items([edited])

        with pytest.raises(StalePreviewError):
            session.confirm(data, ImportOptions(override=True), expected=preview)

    def test_run_dispatches_on_confirmed(self, memory_store):
        session = ImportSession(memory_store)

        session.run(DATA, ImportOptions(confirmed=False))
        assert memory_store.save_count == 0

        session.run(DATA, ImportOptions(confirmed=True))
        assert memory_store.save_count == 1

    def test_persistence_failure(self):
        store = MagicMock()
        store.get_all_languages.return_value = [Language(id=EN, culture_name="English")]
        store.get_items.return_value = [DictionaryItem(key="button", id=30)]
        store.save_items.side_effect = OSError("read-only database")

        with pytest.raises(PersistenceError):
            ImportSession(store).confirm(b",English\r\nbutton,Button\r\n", ImportOptions())

    def test_expected_empty_change_set_matches_noop(self, memory_store):
        data = b",English\r\nfarewell,Goodbye\r\n"

        applied = ImportSession(memory_store).confirm(data, ImportOptions(), expected=ChangeSet())

        assert not applied.has_changes
        assert memory_store.save_count == 0
