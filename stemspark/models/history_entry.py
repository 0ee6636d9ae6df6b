from sqlalchemy import Column, Integer, String, DateTime, Boolean, JSON, Text
from sqlalchemy.sql import func
from stemspark.db import Base

class HistoryEntry(Base):
    __tablename__ = "history_entries"

    id              = Column(Integer, primary_key=True)          # insertion order == recency
    topic           = Column(String(200), nullable=False)
    age_level       = Column(Integer, nullable=False)          # 4..12
    format          = Column(String(16), nullable=False)       # plain | analogy | story | comic | quiz
    language        = Column(String(64), nullable=False)
    read_aloud      = Column(Boolean, nullable=False, default=True)
    output          = Column(JSON, nullable=False)             # str | [{question, options, correctAnswerIndex, explanation}]
    suggested_topic = Column(Text, nullable=True)
    created_at      = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
