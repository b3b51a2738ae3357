"""Phỏm scoring domain: round model, score engine, session aggregation.

Pure logic only. HTTP routes, socket handlers and the session store import
from here; nothing in this package touches the database or Flask.
"""

from .rounds import Player, Round, Session, Transfer, RANKING_SLOTS, SEAT_IDS
from .engine import ScoreResult, compute_round_score
from .aggregate import SessionSummary, TopStat, aggregate

__all__ = [
    'Player', 'Round', 'Session', 'Transfer', 'RANKING_SLOTS', 'SEAT_IDS',
    'ScoreResult', 'compute_round_score',
    'SessionSummary', 'TopStat', 'aggregate',
]
