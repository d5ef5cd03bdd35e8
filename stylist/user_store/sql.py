"""SQL-backed user store (SQLite for development, Postgres in production).

Email uniqueness is a table constraint; `insert` is a single statement and a
constraint violation is reported as DuplicateEmailError, so two concurrent
signups with the same address cannot both succeed.
"""

from __future__ import annotations

import datetime as dt
from typing import List, Mapping, Optional

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    Integer,
    MetaData,
    String,
    Table,
    create_engine,
    select,
    update,
)
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.pool import StaticPool

from stylist.errors import DuplicateEmailError
from stylist.models import User, normalize_email
from stylist.user_store.base import UserStore
from utils.logging_utils import get_tagged_logger, mask_db_url, mask_email

logger = get_tagged_logger(__name__, tag="user_store/sql_user_store")

metadata = MetaData()

users_table = Table(
    "users",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("first_name", String(100), nullable=False),
    Column("email", String(320), nullable=False, unique=True),
    Column("latitude", Float, nullable=False),
    Column("longitude", Float, nullable=False),
    Column("timezone", String(64), nullable=False),
    Column("city", String(200), nullable=True),
    Column("is_active", Boolean, nullable=False, default=True, index=True),
    Column("created_at", DateTime(timezone=True), nullable=False),
)


def _as_utc(value: dt.datetime) -> dt.datetime:
    """SQLite hands back naive datetimes; they were written as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=dt.timezone.utc)
    return value


class SqlUserStore(UserStore):
    """Store users in a relational database through SQLAlchemy Core."""

    def __init__(self, engine: Engine, *, create_schema: bool = True) -> None:
        """Bind to an engine and create the users table if asked."""
        self.engine = engine
        if create_schema:
            metadata.create_all(engine)

    @classmethod
    def from_url(cls, database_url: str, **kwargs) -> "SqlUserStore":
        """Create an engine from a URL and build the store."""
        engine_kwargs: dict = {"future": True}
        if database_url.startswith("sqlite"):
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if database_url in ("sqlite://", "sqlite:///:memory:"):
                # one shared connection, otherwise each checkout sees an empty database
                engine_kwargs["poolclass"] = StaticPool
        logger.info("Connecting user store", extra={"db_url": mask_db_url(database_url)})
        engine = create_engine(database_url, **engine_kwargs)
        return cls(engine, **kwargs)

    @staticmethod
    def _row_to_user(row: Mapping) -> User:
        """Convert a result row into a User."""
        return User(
            id=row["id"],
            first_name=row["first_name"],
            email=row["email"],
            latitude=row["latitude"],
            longitude=row["longitude"],
            timezone=row["timezone"],
            city=row["city"],
            is_active=bool(row["is_active"]),
            created_at=_as_utc(row["created_at"]),
        )

    def find_by_email(self, email: str) -> Optional[User]:
        stmt = select(users_table).where(users_table.c.email == normalize_email(email))
        with self.engine.connect() as conn:
            row = conn.execute(stmt).mappings().first()
        return self._row_to_user(row) if row else None

    def insert(self, user: User) -> User:
        stmt = users_table.insert().values(
            first_name=user.first_name,
            email=user.email,
            latitude=user.latitude,
            longitude=user.longitude,
            timezone=user.timezone,
            city=user.city,
            is_active=user.is_active,
            created_at=user.created_at,
        )
        try:
            with self.engine.begin() as conn:
                result = conn.execute(stmt)
                user_id = result.inserted_primary_key[0]
        except IntegrityError as exc:
            # only the email unique constraint is a duplicate; NOT NULL and friends propagate
            if self.find_by_email(user.email) is None:
                raise
            logger.info("Rejected duplicate registration", extra={"email": mask_email(user.email)})
            raise DuplicateEmailError(user.email) from exc
        return user.with_id(user_id)

    def list_active(self) -> List[User]:
        stmt = select(users_table).where(users_table.c.is_active.is_(True)).order_by(users_table.c.id)
        with self.engine.connect() as conn:
            rows = conn.execute(stmt).mappings().all()
        return [self._row_to_user(r) for r in rows]

    def deactivate(self, email: str) -> bool:
        stmt = (
            update(users_table)
            .where(users_table.c.email == normalize_email(email))
            .values(is_active=False)
        )
        with self.engine.begin() as conn:
            result = conn.execute(stmt)
        return result.rowcount > 0
