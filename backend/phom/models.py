from phom import db
from phom.services.scoring.rounds import Player, Round, Session
import json

NAME_LENGTH = 64


class SessionRecord(db.Model):
    __tablename__ = 'session'
    id = db.Column(db.String(32), primary_key=True)
    name = db.Column(db.String(NAME_LENGTH), nullable=False)
    created_at = db.Column(db.Float, nullable=False, default=0.0, index=True)
    current_round_index = db.Column(db.Integer, nullable=False, default=0)
    rounds = db.Column(db.Text, nullable=False, default='[]')  # JSON-encoded list of rounds
    players = db.relationship(
        'PlayerRecord',
        back_populates='session',
        order_by='PlayerRecord.position',
        cascade='all, delete-orphan',
    )

    def apply(self, session: Session) -> None:
        """Copy a domain session onto this row, replacing its rounds wholesale."""
        self.name = session.name
        self.created_at = session.created_at
        self.current_round_index = session.current_round_index
        self.rounds = json.dumps([r.to_dict() for r in session.rounds])
        by_seat = {p.player_id: p for p in self.players}
        for position, player in enumerate(session.players):
            record = by_seat.get(player.id)
            if record is None:
                record = PlayerRecord(player_id=player.id, position=position)
                self.players.append(record)
            record.name = player.name
            record.position = position

    def to_domain(self) -> Session:
        try:
            rounds = [Round.from_dict(r) for r in json.loads(self.rounds or '[]')]
        except (ValueError, TypeError, KeyError, AttributeError):
            rounds = []
        if not rounds:
            rounds = [Round()]
        index = min(max(int(self.current_round_index or 0), 0), len(rounds) - 1)
        return Session(
            id=self.id,
            name=self.name,
            players=[Player(id=p.player_id, name=p.name) for p in self.players],
            rounds=rounds,
            current_round_index=index,
            created_at=self.created_at or 0.0,
        )


class PlayerRecord(db.Model):
    __tablename__ = 'player'
    id = db.Column(db.Integer, primary_key=True)
    session_id = db.Column(db.String(32), db.ForeignKey('session.id'), nullable=False)
    player_id = db.Column(db.String(8), nullable=False)  # seat id, p1..p4
    position = db.Column(db.Integer, nullable=False, default=0)
    name = db.Column(db.String(NAME_LENGTH), nullable=False)
    session = db.relationship('SessionRecord', back_populates='players')

    __table_args__ = (db.UniqueConstraint('session_id', 'player_id', name='uq_player_session_seat'),)
