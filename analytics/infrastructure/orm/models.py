from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Index, Integer, String, Text

from config.database.session import Base


class UserApiKeyORM(Base):
    __tablename__ = "user_api_key"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # identifier issued by the external auth provider
    user_id = Column(String(255), nullable=False)
    platform = Column(String(50), nullable=False)
    encrypted_key = Column(Text, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    last_used_at = Column(DateTime)

    __table_args__ = (Index("ix_user_api_key_lookup", "user_id", "platform", "is_active"),)
