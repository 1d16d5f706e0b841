# industrin/models/admin_user.py
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, String, false, true

from industrin.db.base import Base
from industrin.models.company import new_id


class AdminUser(Base):
    __tablename__ = "admin_users"

    id = Column(String(36), primary_key=True, default=new_id)

    username = Column(String(120), unique=True, nullable=False, index=True)
    hashed_password = Column(String, nullable=False)

    role = Column(String(30), nullable=False, default="admin")  # admin / super_admin
    is_super_admin = Column(Boolean, nullable=False, default=False, server_default=false())
    is_active = Column(Boolean, nullable=False, default=True, server_default=true())

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    last_login_at = Column(DateTime, nullable=True)
