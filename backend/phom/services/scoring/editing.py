"""Round editing rules.

Every function takes a round and returns an edited copy; the input is never
mutated. Each edit ends with :func:`maintain_invariants`, so burn entries
always point at whoever currently holds the ``first`` slot.
"""
import copy
from typing import Optional, Sequence

from .engine import BURN_POINTS
from .rounds import Player, Round, Transfer, RANKING_SLOTS, DEFAULT_TRANSFER_POINTS


def _check_slot(slot: str) -> None:
    if slot not in RANKING_SLOTS:
        raise ValueError(f"unknown ranking slot: {slot!r}")


def maintain_invariants(round: Round) -> Round:
    if round.self_win:
        round.burns = []
    winner = round.winner
    for burn in round.burns:
        burn.to_id = winner
    return round


def assign_rank(round: Round, slot: str, player_id: str) -> Round:
    _check_slot(slot)
    edited = copy.deepcopy(round)
    for other in RANKING_SLOTS:
        if edited.ranking.get(other) == player_id:
            edited.ranking[other] = None
    edited.ranking[slot] = player_id
    # a ranked player is no longer burned
    edited.burns = [b for b in edited.burns if b.from_id != player_id]
    return maintain_invariants(edited)


def clear_rank(round: Round, slot: str) -> Round:
    _check_slot(slot)
    edited = copy.deepcopy(round)
    edited.ranking[slot] = None
    return maintain_invariants(edited)


def add_burn(round: Round, player_id: str) -> Round:
    if round.self_win or player_id == round.winner:
        return round
    if any(b.from_id == player_id for b in round.burns):
        return round
    edited = copy.deepcopy(round)
    for slot in RANKING_SLOTS[1:]:
        if edited.ranking.get(slot) == player_id:
            edited.ranking[slot] = None
    edited.burns.append(Transfer(from_id=player_id, to_id=edited.winner, amount=BURN_POINTS))
    return maintain_invariants(edited)


def remove_burn(round: Round, player_id: str) -> Round:
    edited = copy.deepcopy(round)
    edited.burns = [b for b in edited.burns if b.from_id != player_id]
    return maintain_invariants(edited)


def set_self_win(round: Round, enabled: bool) -> Round:
    edited = copy.deepcopy(round)
    edited.self_win = bool(enabled)
    return maintain_invariants(edited)


def add_manual_transfer(round: Round, players: Sequence[Player],
                        amount: int = DEFAULT_TRANSFER_POINTS) -> Round:
    """Append a manual transfer prefilled from the last place to the winner."""
    winner = round.winner or players[0].id
    source = round.ranking.get('fourth') or players[-1].id
    target = winner
    if source == target:
        target = next((p.id for p in players if p.id != source), source)
    edited = copy.deepcopy(round)
    edited.manual_transfers.append(Transfer(from_id=source, to_id=target, amount=amount))
    return maintain_invariants(edited)


def update_manual_transfer(round: Round, transfer_id: str, from_id: Optional[str] = None,
                           to_id: Optional[str] = None, amount: Optional[int] = None) -> Round:
    edited = copy.deepcopy(round)
    for transfer in edited.manual_transfers:
        if transfer.id != transfer_id:
            continue
        if from_id is not None:
            transfer.from_id = from_id or None
        if to_id is not None:
            transfer.to_id = to_id or None
        if amount is not None:
            transfer.amount = int(amount)
    return maintain_invariants(edited)


def remove_manual_transfer(round: Round, transfer_id: str) -> Round:
    edited = copy.deepcopy(round)
    edited.manual_transfers = [t for t in edited.manual_transfers if t.id != transfer_id]
    return maintain_invariants(edited)
