from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from .rounds import Player, Round, RANKING_SLOTS

SELF_WIN_BONUS = 15
SELF_WIN_PENALTY = -5
BURN_POINTS = 4
SECOND_PLACE_PAYMENT = 1
THIRD_PLACE_PAYMENT = 2
RANKING_TARIFF = {'first': 6, 'second': -1, 'third': -2, 'fourth': -3}

WARN_NO_SELF_WIN_PLAYER = 'no self-win player chosen'
WARN_BURN_NEEDS_WINNER = 'winner required to score burns'
WARN_WINNER_BURNED = 'winner cannot be burned'
WARN_MISSING_SECOND = 'missing second place'
WARN_MISSING_THIRD = 'missing third place'
WARN_RANKING_INCOMPLETE = 'ranking incomplete'
WARN_INVALID_TRANSFER = 'invalid transfer'


@dataclass
class ScoreResult:
    deltas: Dict[str, int]
    total: int = 0
    warnings: List[str] = field(default_factory=list)

    def to_dict(self):
        return {
            'deltas': dict(self.deltas),
            'total': self.total,
            'warnings': list(self.warnings),
        }


def compute_round_score(round: Round, players: Sequence[Player]) -> ScoreResult:
    """Turn one round's recorded outcome into a signed delta per player.

    Scoring mode is chosen in priority order: self-win, burns, plain ranking.
    Manual transfers are applied afterwards regardless of mode. Problems with
    the round never raise; they are reported in ``warnings`` and the affected
    step is skipped, which usually leaves ``total`` non-zero.
    """
    deltas: Dict[str, int] = {p.id: 0 for p in players}
    warnings: List[str] = []

    def known(player_id: Optional[str]) -> Optional[str]:
        return player_id if player_id in deltas else None

    ranking = {slot: known(round.ranking.get(slot)) for slot in RANKING_SLOTS}
    winner = ranking['first']

    if round.self_win:
        if not winner:
            warnings.append(WARN_NO_SELF_WIN_PLAYER)
        else:
            for pid in deltas:
                deltas[pid] = SELF_WIN_BONUS if pid == winner else SELF_WIN_PENALTY
    else:
        burned: List[str] = []
        for burn in round.burns:
            pid = known(burn.from_id)
            if pid and pid not in burned:
                burned.append(pid)

        if burned:
            _score_burns(deltas, warnings, ranking, burned)
        else:
            _score_ranking(deltas, warnings, ranking)

    for transfer in round.manual_transfers:
        source, target = known(transfer.from_id), known(transfer.to_id)
        if not source or not target or source == target:
            warnings.append(WARN_INVALID_TRANSFER)
            continue
        deltas[source] -= transfer.amount
        deltas[target] += transfer.amount

    return ScoreResult(deltas=deltas, total=sum(deltas.values()), warnings=warnings)


def _score_burns(deltas, warnings, ranking, burned) -> None:
    winner = ranking['first']
    if not winner:
        warnings.append(WARN_BURN_NEEDS_WINNER)
        return
    if winner in burned:
        warnings.append(WARN_WINNER_BURNED)
        return

    for pid in burned:
        deltas[pid] -= BURN_POINTS
        deltas[winner] += BURN_POINTS

    second, third = ranking['second'], ranking['third']
    second_ok = bool(second) and second != winner and second not in burned
    third_ok = bool(third) and third != winner and third != second and third not in burned

    if second_ok:
        deltas[second] -= SECOND_PLACE_PAYMENT
        deltas[winner] += SECOND_PLACE_PAYMENT
    if third_ok:
        deltas[third] -= THIRD_PLACE_PAYMENT
        deltas[winner] += THIRD_PLACE_PAYMENT

    # the winner counts towards the players still in play
    remaining = len([pid for pid in deltas if pid not in burned])
    if remaining >= 2 and not second_ok:
        warnings.append(WARN_MISSING_SECOND)
    if remaining >= 3 and not third_ok:
        warnings.append(WARN_MISSING_THIRD)


def _score_ranking(deltas, warnings, ranking) -> None:
    picks = [ranking[slot] for slot in RANKING_SLOTS]
    if None in picks or len(set(picks)) != len(RANKING_SLOTS):
        warnings.append(WARN_RANKING_INCOMPLETE)
        return
    for slot in RANKING_SLOTS:
        deltas[ranking[slot]] += RANKING_TARIFF[slot]
