from sqlalchemy import Column, String, DateTime, Boolean, ForeignKey, Text, Index
from sqlalchemy.dialects.postgresql import JSONB
from .base import Base, now_utc, new_id


class AuthAccount(Base):
    """Authentication record; the admin profile lives in `admin_users`."""
    __tablename__ = 'auth_accounts'
    uid = Column(String(64), primary_key=True, default=new_id)
    email = Column(String(320), nullable=False, unique=True, index=True)
    password_hash = Column(Text, nullable=False)
    display_name = Column(String(255), nullable=True)
    email_verified = Column(Boolean, nullable=False, default=False)
    disabled = Column(Boolean, nullable=False, default=False)
    # Role metadata copied onto every session, e.g. {"role": "admin", "isAdmin": true}
    custom_claims = Column(JSONB, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)


class AuthSession(Base):
    __tablename__ = 'auth_sessions'

    id = Column(String(64), primary_key=True, default=new_id)
    uid = Column(String(64), ForeignKey('auth_accounts.uid', ondelete='CASCADE'), nullable=False)

    # Token identity and secret hash (never store raw secret)
    token_id = Column(String(64), nullable=False, unique=True)
    token_hash = Column(Text, nullable=False)

    created_at = Column(DateTime(timezone=True), default=now_utc, nullable=False)
    last_used_at = Column(DateTime(timezone=True), nullable=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    revoked_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index('idx_auth_sessions_uid_created', 'uid', 'created_at'),
    )
