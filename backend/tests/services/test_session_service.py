"""
Tests for the server-side session store.
"""

from datetime import timedelta

from farmdirect.models.session import UserSession
from farmdirect.services.session_service import SessionService, hash_session_token
from farmdirect.utils.time_utils import ensure_utc, utcnow


class TestSessionService:
    def test_create_stores_only_token_hash(self, db, grower):
        issued = SessionService(db).create_session(grower.id)

        stored = db.get(UserSession, hash_session_token(issued.token))
        assert stored is not None
        assert stored.user_id == grower.id
        assert db.get(UserSession, issued.token) is None

    def test_resolve_returns_user(self, db, grower):
        service = SessionService(db)
        issued = service.create_session(grower.id)

        user = service.resolve_user(issued.token)

        assert user is not None
        assert user.id == grower.id

    def test_resolve_unknown_or_missing_token(self, db):
        service = SessionService(db)
        assert service.resolve_user(None) is None
        assert service.resolve_user("") is None
        assert service.resolve_user("not-a-real-token") is None

    def test_resolve_slides_expiry(self, db, grower):
        service = SessionService(db)
        issued = service.create_session(grower.id)
        session = db.get(UserSession, hash_session_token(issued.token))
        session.expires_at = utcnow() + timedelta(hours=1)
        db.commit()

        service.resolve_user(issued.token)

        db.expire_all()
        refreshed = db.get(UserSession, hash_session_token(issued.token))
        assert ensure_utc(refreshed.expires_at) > utcnow() + timedelta(days=6)

    def test_expired_session_is_rejected_and_deleted(self, db, grower):
        service = SessionService(db)
        issued = service.create_session(grower.id)
        session = db.get(UserSession, hash_session_token(issued.token))
        session.expires_at = utcnow() - timedelta(minutes=1)
        db.commit()

        assert service.resolve_user(issued.token) is None
        assert db.get(UserSession, hash_session_token(issued.token)) is None

    def test_inactive_user_is_rejected(self, db, make_user):
        dormant = make_user("Dormant", "dormant@example.com", is_active=False)
        service = SessionService(db)
        issued = service.create_session(dormant.id)

        assert service.resolve_user(issued.token) is None

    def test_destroy_session(self, db, grower):
        service = SessionService(db)
        issued = service.create_session(grower.id)

        assert service.destroy_session(issued.token) is True
        assert service.resolve_user(issued.token) is None
        assert service.destroy_session(issued.token) is False

    def test_purge_expired(self, db, grower, buyer):
        service = SessionService(db)
        stale = service.create_session(grower.id)
        fresh = service.create_session(buyer.id)
        session = db.get(UserSession, hash_session_token(stale.token))
        session.expires_at = utcnow() - timedelta(days=1)
        db.commit()

        assert service.purge_expired() == 1
        db.expire_all()
        assert db.get(UserSession, hash_session_token(stale.token)) is None
        assert db.get(UserSession, hash_session_token(fresh.token)) is not None
