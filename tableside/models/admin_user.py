from sqlalchemy import Boolean, Column, DateTime, Integer, String, func

from tableside.core.database import Base


class AdminUser(Base):
    __tablename__ = "admin_users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), nullable=False, unique=True)
    email = Column(String(100), nullable=True, unique=True)
    full_name = Column(String, nullable=False, default="")
    password_hash = Column(String, nullable=False)
    active = Column(Boolean, default=True, nullable=False)
    # Sessions carry this value; bumping it revokes every cookie issued before.
    session_version = Column(Integer, nullable=False, default=0, server_default="0")
    created_at = Column(DateTime, server_default=func.now())
