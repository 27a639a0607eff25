"""User identity registry backed by the ``users`` table.

The unique constraints on the table are the source of truth for identity
uniqueness. ``register`` looks for conflicts up front so the common case gets
a precise error without touching the write path, but two callers racing on
the same identity can both pass that check; the loser's INSERT is then
rejected by the database and the resulting ``IntegrityError`` is mapped back
onto the same error types.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

from pydantic import ValidationError
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from shaker.core.errors import (
    DuplicateExternalId,
    DuplicateIdentity,
    DuplicateIdentityPair,
    InvalidInput,
    NotFound,
    StorageUnavailable,
)
from shaker.models.user import User
from shaker.schemas.user import UserCreate, UserRecord

logger = logging.getLogger(__name__)


class UserRegistry:
    """Creates and looks up :class:`UserRecord` values.

    One registry wraps one session, so concurrent callers each need their own
    registry (and session); the engine underneath can be shared.
    """

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _storage(self) -> Iterator[None]:
        try:
            yield
        except OperationalError as exc:
            self.db.rollback()
            logger.exception("Storage failure while accessing users")
            raise StorageUnavailable("User storage is unavailable") from exc

    def register(self, external_id: Optional[str], display_name: str) -> UserRecord:
        """Store a new user and return it with its assigned id and creation time.

        Raises ``InvalidInput`` for a blank display name before the database
        is touched, ``DuplicateExternalId`` when the external id is already
        taken and ``DuplicateIdentityPair`` when the exact
        (external_id, display_name) pair exists.
        """
        try:
            data = UserCreate(external_id=external_id, display_name=display_name)
        except ValidationError as exc:
            raise InvalidInput(exc.errors()[0]["msg"]) from exc

        with self._storage():
            try:
                self._ensure_available(data)
            except DuplicateIdentity as conflict:
                self.db.rollback()
                logger.warning("Rejected registration: %s", conflict)
                raise

            user = User(external_id=data.external_id, display_name=data.display_name)
            self.db.add(user)
            try:
                self.db.commit()
            except IntegrityError as exc:
                self.db.rollback()
                conflict = self._find_conflict(data)
                if conflict is None:
                    raise
                logger.warning("Rejected concurrent registration: %s", conflict)
                raise conflict from exc

            record = UserRecord.model_validate(user)

        logger.info(
            "Registered user %s (external_id=%r, display_name=%r)",
            record.id,
            record.external_id,
            record.display_name,
        )
        return record

    def _ensure_available(self, data: UserCreate) -> None:
        conflict = self._find_conflict(data)
        if conflict is not None:
            raise conflict

    def _find_conflict(self, data: UserCreate) -> Optional[DuplicateIdentity]:
        # Absent external ids never collide, neither alone nor as part of the pair
        if data.external_id is None:
            return None
        if self._external_id_taken(data.external_id):
            return DuplicateExternalId(data.external_id, data.display_name)
        if self._identity_pair_taken(data.external_id, data.display_name):
            return DuplicateIdentityPair(data.external_id, data.display_name)
        return None

    def _external_id_taken(self, external_id: str) -> bool:
        stmt = select(User.id).where(User.external_id == external_id).limit(1)
        return self.db.execute(stmt).first() is not None

    def _identity_pair_taken(self, external_id: str, display_name: str) -> bool:
        stmt = (
            select(User.id)
            .where(User.external_id == external_id, User.display_name == display_name)
            .limit(1)
        )
        return self.db.execute(stmt).first() is not None

    def find_by_id(self, user_id: int) -> UserRecord:
        with self._storage():
            user = self.db.get(User, user_id)
            if user is None:
                raise NotFound(f"No user with id {user_id}")
            return UserRecord.model_validate(user)

    def find_by_external_id(self, external_id: str) -> UserRecord:
        if external_id is None:
            raise NotFound("Users without an external id cannot be looked up by it")
        with self._storage():
            user = self.db.execute(
                select(User).where(User.external_id == external_id)
            ).scalar_one_or_none()
            if user is None:
                raise NotFound(f"No user with external id '{external_id}'")
            return UserRecord.model_validate(user)

    def find_by_display_name(self, display_name: str) -> List[UserRecord]:
        with self._storage():
            users = self.db.execute(
                select(User).where(User.display_name == display_name).order_by(User.id)
            ).scalars().all()
            return [UserRecord.model_validate(u) for u in users]

    def find_by_identity(self, external_id: Optional[str], display_name: str) -> UserRecord:
        """Find a user by external id, falling back to the oldest user with the display name."""
        if external_id is not None:
            try:
                return self.find_by_external_id(external_id)
            except NotFound:
                pass

        matches = self.find_by_display_name(display_name)
        if not matches:
            raise NotFound(f"No user matching ('{external_id}', '{display_name}')")
        return matches[0]

    def count(self) -> int:
        with self._storage():
            return self.db.execute(select(func.count()).select_from(User)).scalar_one()
