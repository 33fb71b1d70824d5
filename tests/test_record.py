"""Tests for CommandRecord: merge-aware undo/redo over commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from art_catalog.arena import Arena
from art_catalog.commands import Added, Changed, CommandRecord, FieldCommand, Merge, Removed
from art_catalog.errors import CommandError
from art_catalog.models import Piece, PieceId

if TYPE_CHECKING:
    from conftest import MakePiece


def _typed(record: CommandRecord[Arena[PieceId, Piece]], piece_id: PieceId, text: str) -> Merge | None:
    return record.apply(Changed(piece_id, FieldCommand("description", text)))


class TestApplyAndMerge:
    """Consecutive edits of one field collapse into one entry."""

    def test_typing_collapses_to_one_entry(self, make_piece: MakePiece) -> None:
        pieces: Arena[PieceId, Piece] = Arena(PieceId)
        piece_id = pieces.insert(make_piece(description=""))
        record = CommandRecord(pieces)

        assert _typed(record, piece_id, "S") is None
        assert _typed(record, piece_id, "Su") is Merge.YES
        assert _typed(record, piece_id, "Sun") is Merge.YES
        assert len(record) == 1
        assert pieces[piece_id].description == "Sun"

        assert record.undo()
        assert pieces[piece_id].description == ""
        assert not record.can_undo

    def test_returning_to_start_annuls(self, make_piece: MakePiece) -> None:
        pieces: Arena[PieceId, Piece] = Arena(PieceId)
        piece_id = pieces.insert(make_piece(description="a"))
        record = CommandRecord(pieces)

        _typed(record, piece_id, "ab")
        assert _typed(record, piece_id, "a") is Merge.ANNUL
        assert len(record) == 0
        assert pieces[piece_id].description == "a"

    def test_other_piece_is_separate_entry(self, make_piece: MakePiece) -> None:
        pieces: Arena[PieceId, Piece] = Arena(PieceId)
        first = pieces.insert(make_piece())
        second = pieces.insert(make_piece())
        record = CommandRecord(pieces)

        _typed(record, first, "x")
        assert _typed(record, second, "y") is Merge.NO
        assert len(record) == 2

    def test_no_merge_with_redo_pending(self, make_piece: MakePiece) -> None:
        pieces: Arena[PieceId, Piece] = Arena(PieceId)
        piece_id = pieces.insert(make_piece(description=""))
        record = CommandRecord(pieces)

        _typed(record, piece_id, "a")
        _typed(record, piece_id, "ab")
        record.apply(Added(make_piece(description="other")))
        record.undo()
        assert _typed(record, piece_id, "abc") is None
        assert len(record) == 2
        assert not record.can_redo
        assert pieces[piece_id].description == "abc"


class TestUndoRedo:
    """Undo and redo walk the entries; a new command drops the redo tail."""

    def test_undo_redo_add_remove(self, make_piece: MakePiece) -> None:
        pieces: Arena[PieceId, Piece] = Arena(PieceId)
        record = CommandRecord(pieces)
        added: Added[PieceId, Piece] = Added(make_piece(description="p"))
        record.apply(added)
        piece_id = added.id
        assert piece_id is not None
        record.apply(Removed(piece_id))
        assert len(pieces) == 0

        assert record.undo()
        assert len(pieces) == 1
        assert record.undo()
        assert len(pieces) == 0
        assert not record.undo()

        assert record.redo()
        assert record.redo()
        assert len(pieces) == 0
        assert not record.redo()

    def test_new_command_truncates_redo(self, make_piece: MakePiece) -> None:
        pieces: Arena[PieceId, Piece] = Arena(PieceId)
        record = CommandRecord(pieces)
        record.apply(Added(make_piece()))
        record.apply(Added(make_piece()))
        record.undo()
        assert record.can_redo
        record.apply(Added(make_piece()))
        assert not record.can_redo
        assert len(record) == 2

    def test_limit_evicts_oldest(self, make_piece: MakePiece) -> None:
        pieces: Arena[PieceId, Piece] = Arena(PieceId)
        record = CommandRecord(pieces, limit=3)
        for _ in range(5):
            record.apply(Added(make_piece()))
        assert len(record) == 3
        undone = 0
        while record.undo():
            undone += 1
        assert undone == 3
        assert len(pieces) == 2


class TestFailedApply:
    """A command that fails to apply leaves the history as it was."""

    def test_failed_merge_keeps_pending_value(self, make_piece: MakePiece) -> None:
        pieces: Arena[PieceId, Piece] = Arena(PieceId)
        piece_id = pieces.insert(make_piece(description=""))
        record = CommandRecord(pieces)
        _typed(record, piece_id, "a")

        pieces.remove(piece_id)
        with pytest.raises(CommandError):
            _typed(record, piece_id, "ab")
        assert len(record) == 1

        # The freed slot is reused, so the entry targets the new piece
        assert pieces.insert(make_piece(description="z")) == piece_id
        assert record.undo()
        assert pieces[piece_id].description == ""
        assert record.redo()
        assert pieces[piece_id].description == "a"
