### app/vehicles/models.py

# Standard library imports
from typing import List, Optional

# Third party imports
from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

# Local imports
from app.core.db import Base
from app.users.models import AuditMixin


class Vehicle(Base, AuditMixin):
    """
    Vehicle model

    A vehicle is identified by its license plate. Plates come from the
    platform export and are the only key used to match trips to vehicles.
    """

    __tablename__ = "vehicles"

    id: Mapped[int] = mapped_column(primary_key=True, index=True, comment="Primary Key for Vehicle")
    license_plate: Mapped[str] = mapped_column(
        String(64), nullable=False, unique=True, index=True, comment="License plate as shown on the platform listing"
    )
    make_model: Mapped[str] = mapped_column(
        String(255), nullable=False, default="", comment="Make, model and year, e.g. Jeep Grand Cherokee L 2022"
    )
    owner_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True, comment="Partner who owns the vehicle"
    )

    owner: Mapped[Optional["User"]] = relationship(
        "User", back_populates="vehicles_owned", foreign_keys=[owner_id]
    )
    trips: Mapped[List["Trip"]] = relationship(
        "Trip", back_populates="vehicle", cascade="all, delete-orphan", passive_deletes=True
    )

    def __repr__(self) -> str:
        return f"<Vehicle(id={self.id}, license_plate={self.license_plate}, make_model={self.make_model})>"
