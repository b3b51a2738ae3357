import copy
import time
from typing import Callable, Optional, Sequence

from phom.services.scoring.rounds import Player, Round, Session, SEAT_IDS, make_id
from phom.services.scoring.editing import maintain_invariants


def create_players(names: Optional[Sequence[str]] = None):
    names = list(names or [])
    players = []
    for index, seat in enumerate(SEAT_IDS):
        name = names[index].strip() if index < len(names) and names[index] else ''
        players.append(Player(id=seat, name=name or f"Player {index + 1}"))
    return players


def create_session(index: int, names: Optional[Sequence[str]] = None,
                   now: Optional[float] = None) -> Session:
    """Build a new session with four seats and one blank round."""
    return Session(
        id=make_id(),
        name=f"Session {index:02d}",
        players=create_players(names),
        rounds=[Round()],
        current_round_index=0,
        created_at=time.time() if now is None else now,
    )


def rename_players(session: Session, names: Sequence[str]) -> Session:
    updated = copy.deepcopy(session)
    for index, player in enumerate(updated.players):
        if index < len(names) and names[index] and names[index].strip():
            player.name = names[index].strip()
    return updated


def add_round(session: Session) -> Session:
    updated = copy.deepcopy(session)
    updated.rounds.append(Round())
    updated.current_round_index = len(updated.rounds) - 1
    return updated


def remove_round(session: Session, round_id: str) -> Session:
    if len(session.rounds) == 1:
        return session
    removed = next((i for i, r in enumerate(session.rounds) if r.id == round_id), -1)
    if removed == -1:
        return session
    updated = copy.deepcopy(session)
    del updated.rounds[removed]
    cursor = updated.current_round_index
    if cursor > removed:
        cursor -= 1
    elif cursor == removed:
        cursor = max(0, cursor - 1)
    updated.current_round_index = min(cursor, len(updated.rounds) - 1)
    return updated


def go_previous(session: Session) -> Session:
    updated = copy.deepcopy(session)
    updated.current_round_index = max(0, session.current_round_index - 1)
    return updated


def go_next(session: Session) -> Session:
    """Move to the next round, starting a new one from the last round."""
    if session.current_round_index >= len(session.rounds) - 1:
        return add_round(session)
    updated = copy.deepcopy(session)
    updated.current_round_index = session.current_round_index + 1
    return updated


def reset_session(session: Session) -> Session:
    updated = copy.deepcopy(session)
    updated.rounds = [Round()]
    updated.current_round_index = 0
    return updated


def replace_round(session: Session, round_id: str,
                  edit: Callable[[Round], Round]) -> Session:
    """Apply one editing rule to one round of the session.

    All round edits go through here so the invariant step always runs last.
    """
    updated = copy.deepcopy(session)
    updated.rounds = [
        maintain_invariants(edit(r)) if r.id == round_id else r
        for r in updated.rounds
    ]
    return updated
