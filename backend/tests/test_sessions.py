from phom.services import sessions as ops
from phom.services.scoring import editing


def test_create_session_defaults():
    session = ops.create_session(3, now=1700000000.0)
    assert session.name == 'Session 03'
    assert [p.id for p in session.players] == ['p1', 'p2', 'p3', 'p4']
    assert [p.name for p in session.players] == ['Player 1', 'Player 2', 'Player 3', 'Player 4']
    assert len(session.rounds) == 1
    assert session.current_round_index == 0
    assert session.created_at == 1700000000.0


def test_create_session_trims_names_and_falls_back():
    session = ops.create_session(1, ['  Lan ', '', 'Minh'])
    assert [p.name for p in session.players] == ['Lan', 'Player 2', 'Minh', 'Player 4']


def test_rename_players_keeps_ids_and_blank_entries():
    session = ops.create_session(1, ['A', 'B', 'C', 'D'])
    renamed = ops.rename_players(session, ['Anh', '   ', 'Chi'])
    assert [p.name for p in renamed.players] == ['Anh', 'B', 'Chi', 'D']
    assert [p.id for p in renamed.players] == ['p1', 'p2', 'p3', 'p4']
    assert session.players[0].name == 'A'


def test_add_round_moves_cursor():
    session = ops.add_round(ops.create_session(1))
    assert len(session.rounds) == 2
    assert session.current_round_index == 1


def test_navigation_is_clamped_and_next_adds_round():
    session = ops.create_session(1)
    assert ops.go_previous(session).current_round_index == 0
    session = ops.go_next(session)
    assert len(session.rounds) == 2
    assert session.current_round_index == 1
    session = ops.go_previous(session)
    assert session.current_round_index == 0
    session = ops.go_next(session)
    assert len(session.rounds) == 2
    assert session.current_round_index == 1


def test_remove_only_round_is_refused():
    session = ops.create_session(1)
    assert ops.remove_round(session, session.rounds[0].id) is session


def test_remove_round_adjusts_cursor():
    session = ops.add_round(ops.add_round(ops.create_session(1)))
    ids = [r.id for r in session.rounds]

    # cursor on last round, remove an earlier one
    after = ops.remove_round(session, ids[0])
    assert [r.id for r in after.rounds] == ids[1:]
    assert after.current_round_index == 1

    # remove the current round
    after = ops.remove_round(session, ids[2])
    assert after.current_round_index == 1

    # cursor before the removed round stays put
    first = ops.go_previous(ops.go_previous(session))
    after = ops.remove_round(first, ids[1])
    assert after.current_round_index == 0


def test_remove_unknown_round_is_noop():
    session = ops.add_round(ops.create_session(1))
    assert ops.remove_round(session, 'missing') is session


def test_reset_session():
    session = ops.add_round(ops.add_round(ops.create_session(1)))
    reset = ops.reset_session(session)
    assert len(reset.rounds) == 1
    assert reset.current_round_index == 0
    assert reset.rounds[0].id not in {r.id for r in session.rounds}


def test_replace_round_edits_only_target():
    session = ops.add_round(ops.create_session(1))
    target, other = session.rounds[1], session.rounds[0]
    updated = ops.replace_round(session, target.id, lambda r: editing.assign_rank(r, 'first', 'p2'))
    assert updated.find_round(target.id).ranking['first'] == 'p2'
    assert updated.find_round(other.id).ranking['first'] is None
    assert session.find_round(target.id).ranking['first'] is None
