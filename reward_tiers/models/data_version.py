from sqlalchemy import Column, Integer, String, TIMESTAMP
from sqlalchemy.sql import func

from reward_tiers.db import Base


class DataVersion(Base):
    __tablename__ = "data_versions"

    brand = Column(String(50), primary_key=True)
    version = Column(Integer, nullable=False)

    updated_at = Column(TIMESTAMP, server_default=func.now(), onupdate=func.now())
