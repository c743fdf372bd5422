from sqlalchemy import Column, String, DateTime, Boolean, ForeignKey
from sqlalchemy.dialects.postgresql import JSONB
from .base import Base, now_utc


class AdminUser(Base):
    __tablename__ = 'admin_users'
    # Same value as the auth account uid
    id = Column(String(64), ForeignKey('auth_accounts.uid', ondelete='CASCADE'), primary_key=True)
    email = Column(String(320), nullable=False, index=True)
    display_name = Column(String(255), nullable=False, default='')
    # 'super_admin'|'admin'|'librarian'
    role = Column(String(20), nullable=False)
    permissions = Column(JSONB, nullable=False, default=dict)
    assigned_libraries = Column(JSONB, nullable=False, default=list)
    is_active = Column(Boolean, nullable=False, default=True)
    last_login_at = Column(DateTime(timezone=True), nullable=True)
    created_by = Column(String(64), nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_utc)
    updated_at = Column(DateTime(timezone=True), default=now_utc, onupdate=now_utc)
