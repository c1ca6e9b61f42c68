from sqlalchemy import Column, String, DateTime, Date, Integer, Numeric, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.database import Base
import uuid


class CenterLoad(Base):
    __tablename__ = "center_load"
    __table_args__ = (
        UniqueConstraint("center_id", "date", name="uq_center_load_center_date"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    center_id = Column(String(36), ForeignKey("centers.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False)
    current_load = Column(Integer, nullable=False)
    predicted_load = Column(Integer, nullable=True)
    capacity = Column(Integer, nullable=False)
    occupancy_percentage = Column(Numeric(5, 2), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    center = relationship("Center", back_populates="loads")


class DemandForecast(Base):
    __tablename__ = "demand_forecast"
    __table_args__ = (
        UniqueConstraint("center_id", "forecast_date", name="uq_demand_forecast_center_date"),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    center_id = Column(String(36), ForeignKey("centers.id", ondelete="CASCADE"), nullable=True, index=True)
    forecast_date = Column(Date, nullable=False, index=True)
    predicted_demand = Column(Integer, nullable=False)
    actual_demand = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), server_default=func.now())
