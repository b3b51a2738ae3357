from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence

from .engine import ScoreResult, compute_round_score
from .rounds import Player, Round, Transfer

NO_STAT_LABEL = 'none yet'


@dataclass
class TopStat:
    names: List[str]
    count: int

    def to_dict(self):
        return {'names': list(self.names), 'count': self.count}


@dataclass
class SessionSummary:
    totals: Dict[str, int]
    grand_total: int
    top_burned: TopStat
    top_manually_transferred_from: TopStat
    round_results: List[ScoreResult] = field(default_factory=list)

    def to_dict(self):
        return {
            'totals': dict(self.totals),
            'grand_total': self.grand_total,
            'top_burned': self.top_burned.to_dict(),
            'top_manually_transferred_from': self.top_manually_transferred_from.to_dict(),
            'round_results': [r.to_dict() for r in self.round_results],
        }


def aggregate(rounds: Sequence[Round], players: Sequence[Player]) -> SessionSummary:
    """Fold every round's score into session totals and payer statistics."""
    results = [compute_round_score(r, players) for r in rounds]

    totals = {p.id: 0 for p in players}
    for result in results:
        for pid in totals:
            totals[pid] += result.deltas.get(pid, 0)

    return SessionSummary(
        totals=totals,
        grand_total=sum(totals.values()),
        top_burned=_top_stat(players, (t for r in rounds for t in r.burns)),
        top_manually_transferred_from=_top_stat(
            players, (t for r in rounds for t in r.manual_transfers)
        ),
        round_results=results,
    )


def _top_stat(players: Sequence[Player], transfers: Iterable[Transfer]) -> TopStat:
    counts = {p.id: 0 for p in players}
    for transfer in transfers:
        if transfer.from_id in counts:
            counts[transfer.from_id] += 1

    best = max(counts.values(), default=0)
    if best == 0:
        return TopStat(names=[NO_STAT_LABEL], count=0)
    return TopStat(names=[p.name for p in players if counts[p.id] == best], count=best)
