from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String, UniqueConstraint, func

from shaker.db.base import Base


class User(Base):
    __tablename__ = "users"
    __table_args__ = (
        UniqueConstraint("external_id", name="uq_users_external_id"),
        UniqueConstraint("external_id", "display_name", name="uq_users_identity_pair"),
        # AUTOINCREMENT keeps SQLite from handing out the id of a deleted row again
        {"sqlite_autoincrement": True},
    )

    id = Column(Integer, primary_key=True, autoincrement=True, nullable=False)
    external_id = Column(String, nullable=True)
    display_name = Column(String, nullable=False)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=func.current_timestamp(),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, external_id={self.external_id!r}, display_name={self.display_name!r})>"
