# payrollpro/profiles/models.py
from datetime import datetime

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from payrollpro.database import Base


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String(100), nullable=False)
    email = Column(String(150), nullable=False, unique=True, index=True)
    avatar_url = Column(String(255), nullable=True)
    password_hash = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    roles = relationship("UserRole", back_populates="profile", cascade="all, delete-orphan")

    @property
    def role(self):
        names = {r.role for r in self.roles}
        return "admin" if "admin" in names else "employee"

    def __repr__(self):
        return f"<Profile id={self.id} email={self.email}>"


class UserRole(Base):
    __tablename__ = "user_roles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    role = Column(String(20), nullable=False, default="employee")  # admin / employee
    created_at = Column(DateTime, default=datetime.utcnow)

    profile = relationship("Profile", back_populates="roles")
