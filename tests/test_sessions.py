"""Tests for the in-memory session registry."""
import random

import pytest

from zenji.actions import CheckCards, Draw, EndTurn
from zenji.errors import AlreadyChecked, NotYourTurn
from zenji.sessions import SessionNotFound, SessionRegistry
from zenji.state import ACTIVE, WAITING


def test_create_and_get():
    reg = SessionRegistry()
    sid = reg.create(["Ann"], include_ai=True, rng=random.Random(0))
    assert len(sid) == 12
    state = reg.get(sid)
    assert state.status == ACTIVE
    assert len(state.players) == 3
    assert reg.ids() == [sid]

    waiting = reg.create(["Bo"], start=False)
    assert reg.get(waiting).status == WAITING
    assert waiting != sid


def test_apply_stores_new_state_and_keeps_old_on_error():
    reg = SessionRegistry()
    sid = reg.create(["Ann", "Bo"], rng=random.Random(1))
    result = reg.apply(sid, CheckCards())
    assert reg.get(sid) is result.state
    assert reg.get(sid).players[0].has_checked_cards

    before = reg.get(sid)
    with pytest.raises(AlreadyChecked):
        reg.apply(sid, CheckCards())
    with pytest.raises(NotYourTurn):
        reg.apply(sid, Draw(), player_id="player_2")
    assert reg.get(sid) is before

    reg.apply(sid, EndTurn())
    assert reg.get(sid).current_turn == 1


def test_unknown_session():
    reg = SessionRegistry()
    with pytest.raises(SessionNotFound):
        reg.get("nope")
    with pytest.raises(SessionNotFound):
        reg.apply("nope", EndTurn())
    with pytest.raises(KeyError):
        reg.remove("nope")


def test_remove_and_json_transfer():
    reg = SessionRegistry()
    sid = reg.create(["Ann", "Bo"], rng=random.Random(2))
    exported = reg.export_json(sid)

    other = SessionRegistry()
    new_sid = other.import_json(exported)
    assert other.get(new_sid) == reg.get(sid)
    assert other.import_json(exported, session_id="fixed") == "fixed"

    reg.remove(sid)
    with pytest.raises(SessionNotFound):
        reg.get(sid)


def test_import_does_not_overwrite_existing_session():
    reg = SessionRegistry()
    sid = reg.create(["Ann", "Bo"], rng=random.Random(3))
    before = reg.get(sid)
    other = SessionRegistry().import_json(reg.export_json(sid), session_id="kept")
    assert other == "kept"

    exported = reg.export_json(sid)
    with pytest.raises(ValueError):
        reg.import_json(exported, session_id=sid)
    assert reg.get(sid) is before
