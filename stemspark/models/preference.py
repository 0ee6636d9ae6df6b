from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.sql import func
from stemspark.db import Base

class Preference(Base):
    __tablename__ = "preferences"

    key        = Column(String(64), primary_key=True)   # e.g. "stemSparkSelectedVoiceURI"
    value      = Column(Text, nullable=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)
