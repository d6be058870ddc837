"""
Tests for EditorState: snapshots, apply, undo/redo and concurrency.
"""

import threading

import numpy as np
import pytest
from PIL import Image

from IE_Libs.errors import ImageLoadError, InvalidOperation, StateError
from IE_Libs.ImageEditingLib.operation_types import (
    AdjustmentOperation,
    EditOperation,
    FilterOperation,
    TransformOperation,
)
from IE_Libs.StateLib.editor_state import EditorState


@pytest.fixture
def state(square_image):
    editor = EditorState()
    editor.load(square_image)
    return editor


class TestLoad:
    """Tests for loading images into the state."""

    def test_empty_state(self):
        editor = EditorState()

        assert not editor.has_image
        assert editor.snapshot().is_empty
        with pytest.raises(StateError):
            editor.require_current()

    def test_load_sets_original_and_current(self, state, square_image):
        assert state.original is state.current
        assert state.current.tobytes() == square_image.tobytes()

    def test_load_none_fails(self):
        with pytest.raises(ImageLoadError):
            EditorState().load(None)

    def test_load_resets_history(self, state, rgb_image):
        state.apply(FilterOperation("invert"))

        state.load(rgb_image)

        assert state.history_state().history_count == 0
        assert state.current.size == rgb_image.size

    def test_load_file(self, tmp_path, rgb_image):
        path = tmp_path / "photo.png"
        rgb_image.save(path)
        editor = EditorState()

        width, height, label = editor.load_file(path)

        assert (width, height, label) == (64, 48, "PNG")
        assert editor.current.tobytes() == rgb_image.tobytes()


class TestApply:
    """Tests for apply."""

    def test_apply_without_image(self):
        with pytest.raises(StateError):
            EditorState().apply(FilterOperation("invert"))

    def test_apply_records_operation(self, state):
        edit = state.apply(FilterOperation("grayscale"))

        assert state.current.mode == "L"
        assert state.history.history() == [edit]
        assert state.original.mode == "RGB"

    def test_apply_keeps_given_id(self, state):
        edit = EditOperation.create(FilterOperation("sepia"))

        assert state.apply(edit).id == edit.id

    def test_failed_apply_changes_nothing(self, state):
        state.apply(FilterOperation("invert"))
        before = state.current

        with pytest.raises(InvalidOperation):
            state.apply(FilterOperation("blur", 150.0))

        assert state.current is before
        assert state.history_state().history_count == 1

    def test_snapshot_is_stable(self, state):
        snapshot = state.snapshot()
        before = snapshot.current.tobytes()

        state.apply(FilterOperation("invert"))

        assert snapshot.current.tobytes() == before
        assert state.snapshot() is not snapshot

    def test_render_does_not_change_state(self, state):
        current = state.current

        rendered = state.render([TransformOperation("rotate90"), FilterOperation("invert")])

        assert rendered.size == (100, 100)
        assert state.current is current
        assert state.history_state().history_count == 0


class TestUndoRedo:
    """Tests for undo and redo."""

    def test_end_to_end_edit_and_undo(self, square_image):
        editor = EditorState()
        editor.load(square_image)

        editor.apply(AdjustmentOperation(brightness=1.5))
        editor.apply(TransformOperation("rotate90"))

        assert editor.current.size == (100, 100)
        brightened = np.clip(np.asarray(square_image).astype(np.float32) * 1.5, 0, 255).astype(np.uint8)
        np.testing.assert_array_equal(np.asarray(editor.current), np.rot90(brightened, k=-1))

        editor.undo()
        editor.undo()

        assert editor.current.tobytes() == square_image.tobytes()

    def test_undo_without_image(self):
        with pytest.raises(StateError):
            EditorState().undo()

    def test_undo_with_empty_history(self, state):
        assert state.undo() is None
        assert state.redo() is None

    def test_redo_restores_result(self, state):
        state.apply(FilterOperation("sepia"))
        edited = state.current

        state.undo()
        state.redo()

        assert state.current is edited

    def test_new_apply_clears_redo(self, state):
        state.apply(FilterOperation("invert"))
        state.undo()

        state.apply(FilterOperation("sepia"))

        assert state.redo() is None
        assert not state.history_state().can_redo

    def test_evicted_operations_cannot_be_undone(self, square_image):
        editor = EditorState(max_history=3)
        editor.load(square_image)
        for _ in range(5):
            editor.apply(AdjustmentOperation(brightness=0.9))
        expected = editor.render([AdjustmentOperation(brightness=0.9)] * 2)

        for _ in range(3):
            assert editor.undo() is not None

        assert editor.undo() is None
        assert editor.current.tobytes() == expected.tobytes()

    def test_history_state(self, state):
        state.apply(FilterOperation("invert"))
        state.apply(FilterOperation("invert"))
        state.undo()

        assert state.history_state().to_dict() == {
            "can_undo": True,
            "can_redo": True,
            "history_count": 1,
            "redo_count": 1,
        }

    def test_clear(self, state):
        state.apply(FilterOperation("invert"))

        state.clear()

        assert not state.has_image
        assert state.history_state().history_count == 0


class TestConcurrency:
    """Tests for serialized writers."""

    def test_concurrent_applies_are_serialized(self):
        image = Image.new("RGB", (16, 16), (10, 20, 30))
        editor = EditorState()
        editor.load(image)

        def worker():
            for _ in range(5):
                editor.apply(FilterOperation("invert"))

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert editor.history_state().history_count == 20
        assert editor.current.getpixel((0, 0)) == (10, 20, 30)


class TestSharedOperationIds:
    """Undo must not depend on operation ids being unique."""

    def test_same_id_applied_twice_undoes_to_original(self):
        image = Image.new("RGB", (8, 8), (10, 20, 30))
        editor = EditorState()
        editor.load(image)
        wire = {
            "id": "op-1",
            "operation": {"operation_type": "Adjustment", "params": {"brightness": 2.0}},
        }

        editor.apply(EditOperation.from_dict(wire))
        editor.apply(EditOperation.from_dict(wire))
        assert editor.current.getpixel((0, 0)) == (40, 80, 120)

        editor.undo()
        assert editor.current.getpixel((0, 0)) == (20, 40, 60)
        editor.undo()
        assert editor.current.getpixel((0, 0)) == (10, 20, 30)

        editor.redo()
        editor.redo()
        assert editor.current.getpixel((0, 0)) == (40, 80, 120)

    def test_reused_edit_object(self, state, square_image):
        edit = EditOperation.create(FilterOperation("invert"))

        state.apply(edit)
        state.apply(edit)
        state.apply(edit)
        for _ in range(3):
            state.undo()

        assert state.current.tobytes() == square_image.tobytes()


class TestPublished:
    """Tests for the *_published writers."""

    def test_apply_published_returns_its_snapshot(self, state):
        published = state.apply_published(TransformOperation("rotate90"))
        mine = published.snapshot

        state.apply(FilterOperation("grayscale"))

        assert published.changed
        assert mine.current.mode == "RGB"
        assert state.current.mode == "L"
        assert published.history_state.history_count == 1

    def test_undo_published_with_nothing_to_undo(self, state):
        published = state.undo_published()

        assert not published.changed
        assert published.history is None
        assert published.snapshot is state.snapshot()

    def test_redo_published_reports_history(self, state):
        state.apply(FilterOperation("invert"))
        state.undo()

        published = state.redo_published()

        assert published.changed
        assert len(published.history) == 1
        assert published.history_state.can_undo
        assert not published.history_state.can_redo
