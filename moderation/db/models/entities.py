"""Directory entity models: employees, establishments and comments."""

from datetime import datetime
from sqlalchemy import Column, String, DateTime, Date, JSON, ForeignKey, Text, Boolean, Integer
from sqlalchemy.orm import relationship

from moderation.db.base import Base, generate_uuid


class Establishment(Base):
    __tablename__ = "establishments"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    address = Column(Text, nullable=True)
    zone = Column(String(100), nullable=True, index=True)
    category = Column(String(100), nullable=True)  # Bar, Nightclub, GoGo Bar, ...
    description = Column(Text, nullable=True)
    phone = Column(String(50), nullable=True)
    website = Column(String(255), nullable=True)
    opening_hours = Column(JSON, nullable=True)
    services = Column(JSON, nullable=True)
    logo_url = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default="pending", index=True)
    created_by = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    employments = relationship("EmploymentHistory", back_populates="establishment")

    def __repr__(self) -> str:
        return f"<Establishment {self.name} [{self.status}]>"


class Employee(Base):
    __tablename__ = "employees"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    nickname = Column(String(100), nullable=True)
    age = Column(Integer, nullable=True)
    nationality = Column(String(100), nullable=True)
    description = Column(Text, nullable=True)
    photos = Column(JSON, nullable=True)
    social_media = Column(JSON, nullable=True)
    is_freelance = Column(Boolean, default=False)
    status = Column(String(20), nullable=False, default="pending", index=True)
    created_by = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    employment_history = relationship(
        "EmploymentHistory",
        back_populates="employee",
        cascade="all, delete-orphan",
        order_by="EmploymentHistory.start_date",
    )
    comments = relationship("Comment", back_populates="employee", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<Employee {self.name} [{self.status}]>"


class EmploymentHistory(Base):
    """Where an employee works or has worked. At most one row is current."""
    __tablename__ = "employment_history"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    employee_id = Column(String(36), ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    establishment_id = Column(String(36), ForeignKey("establishments.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(String(100), nullable=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    is_current = Column(Boolean, default=True, index=True)
    notes = Column(Text, nullable=True)
    created_by = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    employee = relationship("Employee", back_populates="employment_history")
    establishment = relationship("Establishment", back_populates="employments")

    def __repr__(self) -> str:
        return f"<EmploymentHistory {self.employee_id}@{self.establishment_id} current={self.is_current}>"


class Comment(Base):
    __tablename__ = "comments"

    id = Column(String(36), primary_key=True, default=generate_uuid)
    employee_id = Column(String(36), ForeignKey("employees.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    content = Column(Text, nullable=False)
    rating = Column(Integer, nullable=True)
    status = Column(String(20), nullable=False, default="pending", index=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    employee = relationship("Employee", back_populates="comments")

    def __repr__(self) -> str:
        return f"<Comment {self.id} on {self.employee_id} [{self.status}]>"
