import threading
from typing import Callable, Dict, List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError

from phom import db
from phom.models import SessionRecord
from phom.services.scoring.rounds import Session
from phom.services.sessions import create_session


class SessionStore:
    """In-memory session collection with an explicit load/flush lifecycle.

    - ``load`` reads every persisted session once, at startup
    - every mutation goes through ``update``, which replaces the session by id
      and then flushes it to the database
    - a failed flush is logged and rolled back; memory stays authoritative
    - create and update hold one lock, so edits to a session apply one at a time
    """

    def __init__(self, app=None):
        self._sessions: Dict[str, Session] = {}
        self._lock = threading.RLock()
        self.logger = None
        if app is not None:
            self.init_app(app)

    def init_app(self, app) -> None:
        self.logger = app.logger
        app.extensions['session_store'] = self

    def load(self) -> None:
        try:
            records = SessionRecord.query.order_by(SessionRecord.created_at).all()
            self._sessions = {r.id: r.to_domain() for r in records}
        except SQLAlchemyError as exc:
            db.session.rollback()
            self._sessions = {}
            self.logger.warning(f"[store-load-failed] starting empty: {exc}")
            return
        self.logger.info(f"[store-load] sessions={len(self._sessions)}")

    def sessions(self) -> List[Session]:
        return list(self._sessions.values())

    def get(self, session_id: str) -> Optional[Session]:
        return self._sessions.get(session_id)

    def create(self, names: Optional[Sequence[str]] = None) -> Session:
        with self._lock:
            session = create_session(len(self._sessions) + 1, names)
            self._sessions[session.id] = session
            self.logger.info(f"[session-create] session={session.id} name={session.name}")
            self.flush(session)
            return session

    def update(self, session_id: str, updater: Callable[[Session], Session]) -> Optional[Session]:
        with self._lock:
            current = self._sessions.get(session_id)
            if current is None:
                return None
            updated = updater(current)
            self._sessions[session_id] = updated
            self.flush(updated)
            return updated

    def flush(self, session: Session) -> None:
        try:
            record = db.session.get(SessionRecord, session.id)
            if record is None:
                record = SessionRecord(id=session.id)
            record.apply(session)
            db.session.add(record)
            db.session.commit()
        except SQLAlchemyError as exc:
            db.session.rollback()
            self.logger.warning(f"[store-flush-failed] session={session.id}: {exc}")

    def clear(self) -> None:
        with self._lock:
            self._sessions = {}
