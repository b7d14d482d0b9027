import enum
from sqlalchemy import Column, Integer, String, Text, JSON, DateTime, ForeignKey, Enum as SAEnum, func
from sqlalchemy.orm import relationship
from ..db.base import Base


class LogLevelEnum(str, enum.Enum):
    info = "info"
    warn = "warn"
    error = "error"


class Log(Base):
    __tablename__ = "logs"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    level = Column(SAEnum(LogLevelEnum, name="log_level"), nullable=False)
    message = Column(Text, nullable=False)
    meta = Column(JSON, nullable=True)
    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    user = relationship("User")
