from sqlalchemy import Column, String, Text, Integer, DateTime
from sqlalchemy.orm import declarative_base
from datetime import datetime, timezone

Base = declarative_base()


def utcnow():
    return datetime.now(timezone.utc)


class URLItem(Base):
    __tablename__ = "url_mappings"

    # Primary key doubles as the uniqueness guarantee behind put_if_absent
    code = Column(String(16), primary_key=True)
    long_url = Column(Text, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    hit_count = Column(Integer, default=0, nullable=False)
