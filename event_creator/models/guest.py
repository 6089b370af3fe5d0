"""
Guest model
"""

from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from event_creator.core.db import Base, utc_now

class Guest(Base):
    __tablename__ = "guests"
    
    id = Column(String(64), primary_key=True, index=True)
    event_id = Column(String(64), ForeignKey("events.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)  # invitation order within the event
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(64), nullable=True)
    company = Column(String(255), nullable=True)
    dietary_restrictions = Column(String(255), nullable=True)
    plus_one = Column(Boolean, default=False)
    plus_one_name = Column(String(255), nullable=True)
    status = Column(String(16), nullable=False, default="pending")  # pending, confirmed, declined
    response_token = Column(String(64), unique=True, nullable=False, index=True)
    responded_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=utc_now)
    
    # Relationships
    event = relationship("Event", back_populates="guests")
