"""
Embedded platform backed by SQLAlchemy.

This module provides a local stand-in for the hosted backend so the app can run
(and be tested) without network access. It reproduces the behaviour the hosted
project declares in its migrations:

- identities, profiles and recipes tables, plus a public object bucket table
- a signup trigger that creates exactly one profile per identity, with the username
  taken from signup metadata or the email local-part
- an update trigger that refreshes updated_at
- row-level security: everyone can read profiles and recipes; only the owner can
  insert, update or delete; non-owned rows are silently skipped on update/delete
- ON DELETE CASCADE from identity -> profile -> recipes
- recipes.user_id must reference an existing profile

A LocalDatabase (engine + session factory + token registry) is shared between any
number of LocalPlatform instances; each LocalPlatform carries its own caller.
"""

import logging
import secrets
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Type
from urllib.parse import quote, unquote

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    LargeBinary,
    String,
    Text,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, declarative_base, relationship, sessionmaker
from sqlalchemy.pool import StaticPool
from werkzeug.security import check_password_hash, generate_password_hash

from recipebook.models import AuthSession, Identity, email_local_part
from recipebook.platform.base import (
    AuthenticationError,
    AuthorizationError,
    ConstraintViolationError,
    DataPlatform,
    Join,
    PlatformError,
    UnknownRelationError,
)

logger = logging.getLogger(__name__)

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


class IdentityRow(Base):
    """Auth identities - one row per registered user."""
    __tablename__ = "identities"

    id = Column(String(36), primary_key=True, default=_new_id)
    email = Column(String(320), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    user_metadata = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    profile = relationship(
        "ProfileRow",
        back_populates="identity",
        uselist=False,
        cascade="all, delete-orphan",
    )


class ProfileRow(Base):
    """Public profiles - created by the signup trigger, one per identity."""
    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(
        String(36),
        ForeignKey("identities.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )
    username = Column(Text, nullable=False)
    avatar_url = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    identity = relationship("IdentityRow", back_populates="profile")
    recipes = relationship("RecipeRow", back_populates="profile", cascade="all, delete-orphan")


class RecipeRow(Base):
    """Published recipes."""
    __tablename__ = "recipes"

    # seq breaks ties between rows created within the same clock tick
    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(36), unique=True, nullable=False, default=_new_id, index=True)
    user_id = Column(
        String(36),
        ForeignKey("profiles.user_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(Text, nullable=False)
    image_url = Column(Text, nullable=True)
    ingredients = Column(JSON, nullable=False, default=list)
    instructions = Column(JSON, nullable=False, default=list)
    cooking_time = Column(Integer, nullable=True)
    category = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    profile = relationship("ProfileRow", back_populates="recipes")


class StoredObjectRow(Base):
    """Objects in storage buckets."""
    __tablename__ = "storage_objects"

    id = Column(Integer, primary_key=True, autoincrement=True)
    bucket = Column(String(100), nullable=False)
    key = Column(String(1024), nullable=False)
    owner_id = Column(String(36), nullable=True)
    content_type = Column(String(255), nullable=True)
    content = Column(LargeBinary, nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("bucket", "key", name="uq_storage_bucket_key"),
    )


# Tables reachable through select/insert/update/delete.
TABLES: Dict[str, Type[Base]] = {
    "profiles": ProfileRow,
    "recipes": RecipeRow,
}

# Columns hidden from API rows.
_INTERNAL_COLUMNS = {"seq"}

# Oldest access tokens are revoked past this many live sessions.
MAX_ACTIVE_TOKENS = 10_000


def _serialize(value: Any) -> Any:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.isoformat()
    if isinstance(value, list):
        return list(value)
    return value


def _row_to_dict(row: Base) -> Dict[str, Any]:
    return {
        column.name: _serialize(getattr(row, column.name))
        for column in row.__table__.columns
        if column.name not in _INTERNAL_COLUMNS
    }


class LocalDatabase:
    """
    Shared state of the embedded backend: engine, session factory and issued tokens.

    Args:
        database_url: SQLAlchemy URL. "sqlite://" (in-memory) is shared across
            threads with a StaticPool so every session sees the same data.
        public_url: Prefix used to build public object URLs
        max_tokens: Live access tokens kept before the oldest is revoked
    """

    def __init__(
        self,
        database_url: str = "sqlite://",
        public_url: str = "http://localhost:8501/storage",
        max_tokens: int = MAX_ACTIVE_TOKENS,
    ):
        engine_kwargs: Dict[str, Any] = {"pool_pre_ping": True, "echo": False}
        if database_url.startswith("sqlite"):
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if database_url in ("sqlite://", "sqlite:///:memory:"):
                engine_kwargs["poolclass"] = StaticPool
        self.engine = create_engine(database_url, **engine_kwargs)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        self.public_url = public_url.rstrip("/")
        # access token -> identity id
        self.tokens: Dict[str, str] = {}
        self.max_tokens = max_tokens
        Base.metadata.create_all(bind=self.engine)
        logger.info("Local platform database initialized (%s)", self.engine.url.render_as_string(hide_password=True))

    def session(self) -> Session:
        return self.SessionLocal()

    def remember_token(self, token: str, identity_id: str) -> None:
        """Record an issued access token, revoking the oldest ones over max_tokens."""
        self.tokens[token] = identity_id
        while len(self.tokens) > self.max_tokens:
            # dicts keep insertion order, so the first key is the oldest token
            oldest = next(iter(self.tokens))
            revoked_for = self.tokens.pop(oldest)
            logger.debug("Revoked oldest access token of %s", revoked_for)


class LocalPlatform(DataPlatform):
    """DataPlatform backed by a LocalDatabase, acting as one caller at a time."""

    def __init__(self, database: LocalDatabase):
        self.database = database
        self._session: Optional[AuthSession] = None

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @property
    def caller_id(self) -> Optional[str]:
        if self._session is None:
            return None
        # a revoked token acts as anonymous
        return self.database.tokens.get(self._session.access_token)

    def _model(self, table: str) -> Type[Base]:
        model = TABLES.get(table)
        if model is None:
            raise UnknownRelationError(f'relation "public.{table}" does not exist', 404)
        return model

    def _column(self, model: Type[Base], column: str):
        if column in _INTERNAL_COLUMNS or column not in model.__table__.columns:
            raise UnknownRelationError(
                f'column {model.__tablename__}.{column} does not exist', 400
            )
        return getattr(model, column)

    def _filtered(self, db: Session, model: Type[Base], eq: Optional[Dict[str, Any]]):
        query = db.query(model)
        for column, value in (eq or {}).items():
            query = query.filter(self._column(model, column) == value)
        return query

    def _owned(self, query, model: Type[Base]):
        """Row-level security for update/delete: only the caller's rows are visible."""
        caller = self.caller_id
        if caller is None:
            return None
        return query.filter(model.user_id == caller)

    def _joined(self, db: Session, row: Base, join: Join) -> Optional[Dict[str, Any]]:
        if join.table != "profiles" or not isinstance(row, RecipeRow):
            raise UnknownRelationError(
                f"Could not find a relationship between '{row.__tablename__}' and '{join.table}'",
                400,
            )
        profile = db.query(ProfileRow).filter(ProfileRow.user_id == row.user_id).first()
        if profile is None:
            return None
        data = _row_to_dict(profile)
        if "*" in join.columns:
            return data
        for column in join.columns:
            self._column(ProfileRow, column)
        return {column: data[column] for column in join.columns}

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------

    def select(
        self,
        table: str,
        *,
        eq: Optional[Dict[str, Any]] = None,
        join: Optional[Join] = None,
        order_by: Optional[str] = None,
        ascending: bool = True,
    ) -> List[Dict[str, Any]]:
        model = self._model(table)
        with self.database.session() as db:
            query = self._filtered(db, model, eq)
            if order_by:
                column = self._column(model, order_by)
                tiebreak = getattr(model, "seq", model.id)
                if ascending:
                    query = query.order_by(column.asc(), tiebreak.asc())
                else:
                    query = query.order_by(column.desc(), tiebreak.desc())

            rows = []
            for row in query.all():
                data = _row_to_dict(row)
                if join is not None:
                    data[join.table] = self._joined(db, row, join)
                rows.append(data)
            return rows

    def insert(self, table: str, record: Dict[str, Any]) -> Dict[str, Any]:
        model = self._model(table)
        caller = self.caller_id
        if caller is None or record.get("user_id") != caller:
            raise AuthorizationError(
                f'new row violates row-level security policy for table "{table}"', 403
            )

        values = {}
        for column, value in record.items():
            self._column(model, column)
            values[column] = value

        with self.database.session() as db:
            if model is RecipeRow:
                has_profile = db.query(ProfileRow).filter(ProfileRow.user_id == caller).first()
                if has_profile is None:
                    raise ConstraintViolationError(
                        'insert on table "recipes" violates foreign key constraint "recipes_profiles_fkey"',
                        409,
                    )
            row = model(**values)
            db.add(row)
            try:
                db.commit()
            except IntegrityError as e:
                db.rollback()
                raise ConstraintViolationError(str(e.orig), 409) from e
            db.refresh(row)
            logger.debug("Inserted row into %s for %s", table, caller)
            return _row_to_dict(row)

    def update(
        self, table: str, values: Dict[str, Any], *, eq: Dict[str, Any]
    ) -> List[Dict[str, Any]]:
        model = self._model(table)
        for column in values:
            self._column(model, column)
        if "user_id" in values and values["user_id"] != self.caller_id:
            raise AuthorizationError(
                f'new row violates row-level security policy for table "{table}"', 403
            )

        with self.database.session() as db:
            query = self._owned(self._filtered(db, model, eq), model)
            if query is None:
                return []
            rows = query.all()
            for row in rows:
                for column, value in values.items():
                    setattr(row, column, value)
                # update trigger fires even when no value changed
                row.updated_at = _utcnow()
            try:
                db.commit()
            except IntegrityError as e:
                db.rollback()
                raise ConstraintViolationError(str(e.orig), 409) from e
            for row in rows:
                db.refresh(row)
            return [_row_to_dict(row) for row in rows]

    def delete(self, table: str, *, eq: Dict[str, Any]) -> List[Dict[str, Any]]:
        model = self._model(table)
        with self.database.session() as db:
            query = self._owned(self._filtered(db, model, eq), model)
            if query is None:
                return []
            rows = query.all()
            deleted = [_row_to_dict(row) for row in rows]
            for row in rows:
                db.delete(row)
            db.commit()
            logger.debug("Deleted %d row(s) from %s", len(deleted), table)
            return deleted

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------

    def upload(
        self,
        bucket: str,
        key: str,
        content: bytes,
        content_type: Optional[str] = None,
    ) -> str:
        caller = self.caller_id
        if caller is None:
            raise AuthorizationError("new row violates row-level security policy", 403)

        with self.database.session() as db:
            db.add(
                StoredObjectRow(
                    bucket=bucket,
                    key=key,
                    owner_id=caller,
                    content_type=content_type,
                    content=content,
                )
            )
            try:
                db.commit()
            except IntegrityError as e:
                db.rollback()
                raise ConstraintViolationError("The resource already exists", 409) from e
        return key

    def get_public_url(self, bucket: str, key: str) -> str:
        return f"{self.database.public_url}/{bucket}/{quote(key)}"

    def download(self, bucket: str, key: str) -> bytes:
        """Read an object's bytes (public read)."""
        with self.database.session() as db:
            row = (
                db.query(StoredObjectRow)
                .filter(StoredObjectRow.bucket == bucket, StoredObjectRow.key == key)
                .first()
            )
            if row is None:
                raise UnknownRelationError("Object not found", 404)
            return row.content

    def image_source(self, url: str) -> Any:
        """Public URLs of this backend are not served over HTTP; hand back the bytes."""
        prefix = f"{self.database.public_url}/"
        if not url.startswith(prefix):
            return url
        bucket, _, key = url[len(prefix):].partition("/")
        try:
            return self.download(bucket, unquote(key))
        except PlatformError as e:
            logger.warning("Could not load stored image %s: %s", url, e.message)
            return None

    # ------------------------------------------------------------------
    # Auth
    # ------------------------------------------------------------------

    def _issue_session(self, identity: IdentityRow) -> AuthSession:
        token = secrets.token_urlsafe(32)
        self.database.remember_token(token, identity.id)
        return AuthSession(
            access_token=token,
            refresh_token=secrets.token_urlsafe(32),
            identity=Identity(
                id=identity.id,
                email=identity.email,
                metadata=dict(identity.user_metadata or {}),
            ),
        )

    def sign_up(
        self,
        email: str,
        password: str,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> Optional[AuthSession]:
        email = (email or "").strip().lower()
        if not email or "@" not in email:
            raise AuthenticationError("Unable to validate email address: invalid format", 422)
        if not password or len(password) < 6:
            raise AuthenticationError("Password should be at least 6 characters.", 422)

        metadata = dict(metadata or {})
        with self.database.session() as db:
            if db.query(IdentityRow).filter(IdentityRow.email == email).first() is not None:
                raise AuthenticationError("User already registered", 422)

            identity = IdentityRow(
                email=email,
                password_hash=generate_password_hash(password),
                user_metadata=metadata,
            )
            # signup trigger: exactly one profile per new identity
            identity.profile = ProfileRow(
                username=metadata.get("username") or email_local_part(email),
            )
            db.add(identity)
            try:
                db.commit()
            except IntegrityError as e:
                db.rollback()
                raise AuthenticationError("User already registered", 422) from e
            db.refresh(identity)
            logger.info("Registered identity %s", identity.id)
            return self._issue_session(identity)

    def sign_in(self, email: str, password: str) -> AuthSession:
        email = (email or "").strip().lower()
        with self.database.session() as db:
            identity = db.query(IdentityRow).filter(IdentityRow.email == email).first()
            if identity is None or not check_password_hash(identity.password_hash, password or ""):
                raise AuthenticationError("Invalid login credentials", 400)
            return self._issue_session(identity)

    def sign_out(self) -> None:
        if self._session is not None:
            self.database.tokens.pop(self._session.access_token, None)

    def set_auth(self, session: Optional[AuthSession]) -> None:
        self._session = session

    # ------------------------------------------------------------------
    # Administration
    # ------------------------------------------------------------------

    def delete_identity(self, user_id: str) -> bool:
        """
        Remove an identity the way an administrator would.

        Cascades to the identity's profile and, through it, to all its recipes.

        Returns:
            True if the identity existed
        """
        with self.database.session() as db:
            identity = db.get(IdentityRow, user_id)
            if identity is None:
                return False
            db.delete(identity)
            db.commit()
        for token, owner in list(self.database.tokens.items()):
            if owner == user_id:
                del self.database.tokens[token]
        logger.info("Deleted identity %s", user_id)
        return True
