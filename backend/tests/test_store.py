import threading

from sqlalchemy.exc import OperationalError

from phom import db
from phom.models import SessionRecord
from phom.services import sessions as ops
from phom.services.scoring import editing
from phom.services.store import SessionStore


def test_create_flushes_to_database(store):
    session = store.create(['An', 'Binh', 'Cuong', 'Dung'])
    record = db.session.get(SessionRecord, session.id)
    assert record is not None
    assert [p.name for p in record.players] == ['An', 'Binh', 'Cuong', 'Dung']
    assert record.to_domain().to_dict() == session.to_dict()


def test_session_names_are_numbered(store):
    assert store.create().name == 'Session 01'
    assert store.create().name == 'Session 02'
    assert [s.name for s in store.sessions()] == ['Session 01', 'Session 02']


def test_update_replaces_session_and_flushes(store):
    session = store.create()
    round_id = session.rounds[0].id
    store.update(session.id, lambda s: ops.replace_round(s, round_id, lambda r: editing.assign_rank(r, 'first', 'p3')))
    assert store.get(session.id).rounds[0].ranking['first'] == 'p3'
    reloaded = db.session.get(SessionRecord, session.id).to_domain()
    assert reloaded.rounds[0].ranking['first'] == 'p3'


def test_update_unknown_session_returns_none(store):
    assert store.update('missing', ops.add_round) is None


def test_load_restores_sessions(flask_app, store):
    first = store.create(['A', 'B', 'C', 'D'])
    store.update(first.id, ops.add_round)
    store.update(first.id, lambda s: ops.rename_players(s, ['Anh']))
    second = store.create()

    fresh = SessionStore(flask_app)
    fresh.load()
    assert [s.id for s in fresh.sessions()] == [first.id, second.id]
    restored = fresh.get(first.id)
    assert restored.to_dict() == store.get(first.id).to_dict()
    assert restored.players[0].name == 'Anh'
    assert restored.current_round_index == 1


def test_flush_failure_keeps_memory_state(store, monkeypatch):
    session = store.create()

    def broken_commit():
        raise OperationalError('COMMIT', {}, Exception('disk full'))

    monkeypatch.setattr(db.session, 'commit', broken_commit)
    updated = store.update(session.id, ops.add_round)
    assert updated is not None
    assert len(store.get(session.id).rounds) == 2


def test_load_failure_starts_empty(flask_app):
    db.drop_all()
    fresh = SessionStore(flask_app)
    fresh.load()
    assert fresh.sessions() == []
    db.create_all()


def test_corrupt_rounds_column_loads_blank_round(flask_app, store):
    session = store.create()
    record = db.session.get(SessionRecord, session.id)
    record.rounds = 'not json'
    record.current_round_index = 5
    db.session.commit()

    fresh = SessionStore(flask_app)
    fresh.load()
    restored = fresh.get(session.id)
    assert len(restored.rounds) == 1
    assert restored.current_round_index == 0


def test_concurrent_updates_are_not_lost(store, monkeypatch):
    session = store.create()
    monkeypatch.setattr(store, 'flush', lambda s: None)

    def worker():
        for _ in range(50):
            store.update(session.id, ops.add_round)

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(store.get(session.id).rounds) == 1 + 4 * 50


def test_concurrent_creates_get_distinct_names(store, monkeypatch):
    monkeypatch.setattr(store, 'flush', lambda s: None)
    threads = [threading.Thread(target=store.create) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    names = [s.name for s in store.sessions()]
    assert sorted(names) == [f'Session {i:02d}' for i in range(1, 9)]
