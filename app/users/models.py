# app/users/models.py

from typing import List, Optional

from sqlalchemy import (
    Boolean, Column, DateTime, ForeignKey, Integer,
    String, func,
)
from sqlalchemy.ext.declarative import declared_attr
from sqlalchemy.orm import relationship, Mapped, mapped_column

from app.core.db import Base

# --- Mixins ---
class AuditMixin:
    """Mixin for auditing fields."""

    @declared_attr
    def created_by(cls):
        """
        Column for the user who created this record
        """
        return Column(
            Integer,
            ForeignKey("users.id", ondelete="SET NULL", onupdate="CASCADE"),
            nullable=True,
            comment="User who created this record",
        )

    @declared_attr
    def modified_by(cls):
        """
        Column for the user who last modified this record
        """
        return Column(
            Integer,
            ForeignKey("users.id", ondelete="SET NULL", onupdate="CASCADE"),
            nullable=True,
            comment="User who last modified this record",
        )

    @declared_attr
    def created_on(cls):
        """
        Column for the timestamp when this record was created
        """
        return Column(
            DateTime(timezone=True),
            server_default=func.now(),
            comment="Timestamp when this record was created",
        )

    @declared_attr
    def updated_on(cls):
        """
        Column for the timestamp when this record was last updated
        """
        return Column(
            DateTime(timezone=True),
            onupdate=func.now(),
            server_default=func.now(),
            comment="Timestamp when this record was last updated",
        )
# --- End of Mixins ---


class User(Base, AuditMixin):
    """
    User model. Users are managed elsewhere; the ingestion API only reads
    them to resolve the caller and to link vehicles to their owners.
    """
    __tablename__ = "users"

    # --- Columns ---
    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    first_name: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String(128), nullable=True)
    email_address: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    # --- Relationships ---
    vehicles_owned: Mapped[List["Vehicle"]] = relationship(
        "Vehicle", back_populates="owner", foreign_keys="Vehicle.owner_id"
    )

    @property
    def name(self):
        """
        Returns concatenated name
        """
        return f"{self.first_name or ''} {self.last_name or ''}".strip()

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email_address}', is_active={self.is_active})>"
