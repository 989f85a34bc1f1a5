"""
User model.
Authenticated via Firebase (firebase_uid).
"""
from sqlalchemy import Column, String, Index, DateTime
from datetime import datetime
from calorel.models.base import Base, generate_uuid


class User(Base):
    """User model, created on first authenticated request."""
    
    __tablename__ = "users"
    
    id = Column(String(36), primary_key=True, default=generate_uuid)
    firebase_uid = Column(String(128), nullable=False, unique=True)  # Firebase user ID
    email = Column(String(255), nullable=True)  # Email from Firebase token
    preferred_language = Column(String(2), nullable=True, default='es')  # Language for quota messages (es, en)
    
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    
    # Index on firebase_uid for fast lookups
    __table_args__ = (
        Index("idx_user_firebase_uid", "firebase_uid"),
    )
    
    def __repr__(self):
        return f"<User(id={self.id}, firebase_uid={self.firebase_uid})>"
