"""
Event model
"""

from sqlalchemy import Column, Integer, String, Text, Date, DateTime
from sqlalchemy.orm import relationship

from event_creator.core.db import Base, utc_now

class Event(Base):
    __tablename__ = "events"
    
    id = Column(String(64), primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, default="")
    date = Column(Date, nullable=False)
    time = Column(String(5), nullable=False)
    location = Column(String(255), nullable=False)
    category = Column(String(32), nullable=False, default="social")  # business, celebration, networking, entertainment, social
    cover_image = Column(String(512), nullable=True)
    capacity = Column(Integer, nullable=True)
    status = Column(String(16), nullable=False, default="draft", index=True)  # draft, published, cancelled
    created_by = Column(String(255), nullable=True, index=True)
    created_at = Column(DateTime, default=utc_now)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)
    
    # Relationships
    guests = relationship(
        "Guest",
        back_populates="event",
        cascade="all, delete-orphan",
        order_by="Guest.position"
    )
