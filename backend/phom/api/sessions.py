from flask import Blueprint, jsonify, request, current_app
from phom.services.scoring import compute_round_score, aggregate
from phom.services.scoring import editing
from phom.services import sessions as session_ops
from phom.socketio_events import notify_session_update
from phom.models import NAME_LENGTH


sessions = Blueprint('sessions', __name__)


def _store():
    return current_app.extensions['session_store']


def _default_points() -> int:
    try:
        return int(current_app.config.get('DEFAULT_TRANSFER_POINTS', 4))
    except (TypeError, ValueError):
        return 4


def _session_payload(session):
    payload = session.to_dict()
    current = session.current_round
    payload['current_round'] = current.to_dict()
    payload['current_score'] = compute_round_score(current, session.players).to_dict()
    return payload


def _not_found(what: str):
    return jsonify({'error': f'{what} not found'}), 404


def _player_ids(session):
    return {p.id for p in session.players}


def _names_too_long(names) -> bool:
    return any(len(n.strip()) > NAME_LENGTH for n in names)


def _mutate(session_id: str, updater, tag: str):
    updated = _store().update(session_id, updater)
    if updated is None:
        return _not_found('Session')
    current_app.logger.info(f"[{tag}] session={session_id} rounds={len(updated.rounds)} cursor={updated.current_round_index}")
    notify_session_update(session_id)
    return jsonify(_session_payload(updated))


def _edit_round(session_id: str, round_id: str, edit, tag: str):
    store = _store()
    session = store.get(session_id)
    if not session:
        return _not_found('Session')
    if not session.find_round(round_id):
        return _not_found('Round')
    try:
        updated = store.update(session_id, lambda s: session_ops.replace_round(s, round_id, edit))
    except ValueError as exc:
        return jsonify({'error': str(exc)}), 400
    edited = updated.find_round(round_id)
    score = compute_round_score(edited, updated.players)
    current_app.logger.info(f"[{tag}] session={session_id} round={round_id} total={score.total} warnings={len(score.warnings)}")
    notify_session_update(session_id)
    return jsonify({'round': edited.to_dict(), 'score': score.to_dict()})


@sessions.route('', methods=['GET'])
def list_sessions():
    return jsonify([s.to_dict(include_rounds=False) for s in _store().sessions()])


@sessions.route('', methods=['POST'])
def create_session():
    data = request.get_json(silent=True) or {}
    names = data.get('names') or []
    if not isinstance(names, list):
        return jsonify({'error': 'names must be a list'}), 400
    names = [str(n) for n in names if n is not None]
    if _names_too_long(names):
        return jsonify({'error': f'names are limited to {NAME_LENGTH} characters'}), 400
    session = _store().create(names)
    return jsonify(_session_payload(session)), 201


@sessions.route('/<string:session_id>', methods=['GET'])
def get_session(session_id):
    session = _store().get(session_id)
    if not session:
        return _not_found('Session')
    return jsonify(_session_payload(session))


@sessions.route('/<string:session_id>/players', methods=['PUT'])
def rename_players(session_id):
    data = request.get_json(silent=True) or {}
    names = data.get('names')
    if not isinstance(names, list):
        return jsonify({'error': 'names must be a list'}), 400
    names = ['' if n is None else str(n) for n in names]
    if _names_too_long(names):
        return jsonify({'error': f'names are limited to {NAME_LENGTH} characters'}), 400
    return _mutate(session_id, lambda s: session_ops.rename_players(s, names), 'players-rename')


@sessions.route('/<string:session_id>/reset', methods=['POST'])
def reset_session(session_id):
    return _mutate(session_id, session_ops.reset_session, 'session-reset')


@sessions.route('/<string:session_id>/rounds', methods=['POST'])
def add_round(session_id):
    return _mutate(session_id, session_ops.add_round, 'round-add')


@sessions.route('/<string:session_id>/rounds/<string:round_id>', methods=['DELETE'])
def remove_round(session_id, round_id):
    session = _store().get(session_id)
    if not session:
        return _not_found('Session')
    if not session.find_round(round_id):
        return _not_found('Round')
    if len(session.rounds) == 1:
        return jsonify({'error': 'A session keeps at least one round'}), 400
    return _mutate(session_id, lambda s: session_ops.remove_round(s, round_id), 'round-remove')


@sessions.route('/<string:session_id>/navigate', methods=['POST'])
def navigate(session_id):
    data = request.get_json(silent=True) or {}
    direction = data.get('direction')
    if direction == 'prev':
        return _mutate(session_id, session_ops.go_previous, 'navigate-prev')
    if direction == 'next':
        return _mutate(session_id, session_ops.go_next, 'navigate-next')
    return jsonify({'error': "direction must be 'prev' or 'next'"}), 400


@sessions.route('/<string:session_id>/rounds/<string:round_id>/score', methods=['GET'])
def round_score(session_id, round_id):
    session = _store().get(session_id)
    if not session:
        return _not_found('Session')
    found = session.find_round(round_id)
    if not found:
        return _not_found('Round')
    return jsonify(compute_round_score(found, session.players).to_dict())


@sessions.route('/<string:session_id>/rounds/<string:round_id>/ranking/<string:slot>', methods=['PUT'])
def assign_rank(session_id, round_id, slot):
    session = _store().get(session_id)
    if not session:
        return _not_found('Session')
    player_id = (request.get_json(silent=True) or {}).get('player_id')
    if player_id not in _player_ids(session):
        return jsonify({'error': 'Unknown player'}), 400
    return _edit_round(session_id, round_id, lambda r: editing.assign_rank(r, slot, player_id), 'rank-assign')


@sessions.route('/<string:session_id>/rounds/<string:round_id>/ranking/<string:slot>', methods=['DELETE'])
def clear_rank(session_id, round_id, slot):
    return _edit_round(session_id, round_id, lambda r: editing.clear_rank(r, slot), 'rank-clear')


@sessions.route('/<string:session_id>/rounds/<string:round_id>/burns', methods=['POST'])
def add_burn(session_id, round_id):
    session = _store().get(session_id)
    if not session:
        return _not_found('Session')
    player_id = (request.get_json(silent=True) or {}).get('player_id')
    if player_id not in _player_ids(session):
        return jsonify({'error': 'Unknown player'}), 400
    return _edit_round(session_id, round_id, lambda r: editing.add_burn(r, player_id), 'burn-add')


@sessions.route('/<string:session_id>/rounds/<string:round_id>/burns/<string:player_id>', methods=['DELETE'])
def remove_burn(session_id, round_id, player_id):
    return _edit_round(session_id, round_id, lambda r: editing.remove_burn(r, player_id), 'burn-remove')


@sessions.route('/<string:session_id>/rounds/<string:round_id>/self-win', methods=['PUT'])
def set_self_win(session_id, round_id):
    data = request.get_json(silent=True) or {}
    if not isinstance(data.get('enabled'), bool):
        return jsonify({'error': 'enabled must be true or false'}), 400
    enabled = data['enabled']
    return _edit_round(session_id, round_id, lambda r: editing.set_self_win(r, enabled), 'self-win')


@sessions.route('/<string:session_id>/rounds/<string:round_id>/transfers', methods=['POST'])
def add_transfer(session_id, round_id):
    session = _store().get(session_id)
    if not session:
        return _not_found('Session')
    data = request.get_json(silent=True) or {}
    try:
        amount = int(data.get('amount', _default_points()))
    except (TypeError, ValueError):
        return jsonify({'error': 'amount must be an integer'}), 400
    players = session.players
    return _edit_round(
        session_id, round_id,
        lambda r: editing.add_manual_transfer(r, players, amount),
        'transfer-add',
    )


@sessions.route('/<string:session_id>/rounds/<string:round_id>/transfers/<string:transfer_id>', methods=['PATCH'])
def update_transfer(session_id, round_id, transfer_id):
    session = _store().get(session_id)
    if not session:
        return _not_found('Session')
    found = session.find_round(round_id)
    if not found:
        return _not_found('Round')
    if not any(t.id == transfer_id for t in found.manual_transfers):
        return _not_found('Transfer')

    data = request.get_json(silent=True) or {}
    known = _player_ids(session) | {''}
    from_id, to_id = data.get('from'), data.get('to')
    for value in (from_id, to_id):
        if value is not None and value not in known:
            return jsonify({'error': 'Unknown player'}), 400
    amount = data.get('amount')
    if amount is not None:
        try:
            amount = int(amount)
        except (TypeError, ValueError):
            return jsonify({'error': 'amount must be an integer'}), 400
    return _edit_round(
        session_id, round_id,
        lambda r: editing.update_manual_transfer(r, transfer_id, from_id=from_id, to_id=to_id, amount=amount),
        'transfer-update',
    )


@sessions.route('/<string:session_id>/rounds/<string:round_id>/transfers/<string:transfer_id>', methods=['DELETE'])
def remove_transfer(session_id, round_id, transfer_id):
    return _edit_round(session_id, round_id, lambda r: editing.remove_manual_transfer(r, transfer_id), 'transfer-remove')


@sessions.route('/<string:session_id>/summary', methods=['GET'])
def session_summary(session_id):
    session = _store().get(session_id)
    if not session:
        return _not_found('Session')
    summary = aggregate(session.rounds, session.players)
    payload = summary.to_dict()
    payload['players'] = [p.to_dict() for p in session.players]
    return jsonify(payload)
