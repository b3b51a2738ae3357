from dataclasses import dataclass, field
from typing import Dict, List, Optional
import uuid

RANKING_SLOTS = ('first', 'second', 'third', 'fourth')
SEAT_IDS = ('p1', 'p2', 'p3', 'p4')
DEFAULT_TRANSFER_POINTS = 4


def make_id() -> str:
    return uuid.uuid4().hex


def _clean_id(value) -> Optional[str]:
    # JSON clients send '' for an empty slot
    if value is None or value == '':
        return None
    return str(value)


@dataclass
class Player:
    id: str
    name: str

    def to_dict(self):
        return {'id': self.id, 'name': self.name}

    @classmethod
    def from_dict(cls, data) -> 'Player':
        return cls(id=str(data['id']), name=str(data.get('name') or ''))


@dataclass
class Transfer:
    """A point movement from one player to another.

    Used both for burn entries (``to`` tracks the round winner) and for
    manual transfers.
    """

    from_id: Optional[str]
    to_id: Optional[str]
    amount: int = DEFAULT_TRANSFER_POINTS
    id: str = field(default_factory=make_id)

    def to_dict(self):
        return {
            'id': self.id,
            'from': self.from_id,
            'to': self.to_id,
            'amount': self.amount,
        }

    @classmethod
    def from_dict(cls, data) -> 'Transfer':
        return cls(
            id=str(data.get('id') or make_id()),
            from_id=_clean_id(data.get('from')),
            to_id=_clean_id(data.get('to')),
            amount=int(data.get('amount', DEFAULT_TRANSFER_POINTS)),
        )


@dataclass
class Round:
    self_win: bool = False
    ranking: Dict[str, Optional[str]] = field(
        default_factory=lambda: {slot: None for slot in RANKING_SLOTS}
    )
    burns: List[Transfer] = field(default_factory=list)
    manual_transfers: List[Transfer] = field(default_factory=list)
    id: str = field(default_factory=make_id)

    @property
    def winner(self) -> Optional[str]:
        return self.ranking.get('first')

    def to_dict(self):
        return {
            'id': self.id,
            'self_win': self.self_win,
            'ranking': {slot: self.ranking.get(slot) for slot in RANKING_SLOTS},
            'burns': [t.to_dict() for t in self.burns],
            'manual_transfers': [t.to_dict() for t in self.manual_transfers],
        }

    @classmethod
    def from_dict(cls, data) -> 'Round':
        ranking = data.get('ranking') or {}
        return cls(
            id=str(data.get('id') or make_id()),
            self_win=bool(data.get('self_win', False)),
            ranking={slot: _clean_id(ranking.get(slot)) for slot in RANKING_SLOTS},
            burns=[Transfer.from_dict(t) for t in data.get('burns') or []],
            manual_transfers=[Transfer.from_dict(t) for t in data.get('manual_transfers') or []],
        )


@dataclass
class Session:
    """One sitting of four players: an ordered list of rounds plus a cursor."""

    id: str
    name: str
    players: List[Player]
    rounds: List[Round]
    current_round_index: int = 0
    created_at: float = 0.0

    @property
    def current_round(self) -> Round:
        return self.rounds[self.current_round_index]

    def find_round(self, round_id: str) -> Optional[Round]:
        for r in self.rounds:
            if r.id == round_id:
                return r
        return None

    def to_dict(self, include_rounds: bool = True):
        data = {
            'id': self.id,
            'name': self.name,
            'players': [p.to_dict() for p in self.players],
            'current_round_index': self.current_round_index,
            'round_count': len(self.rounds),
            'created_at': self.created_at,
        }
        if include_rounds:
            data['rounds'] = [r.to_dict() for r in self.rounds]
        return data
