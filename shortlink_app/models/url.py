from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.sql import func

from shortlink_app.database.connection import Base


class URLMapping(Base):
    """
    A short code and the long URL it points to.

    Only short_code is unique. The same long URL may sit behind several
    codes (update does not deduplicate); dedup on create is done by the
    service through a reverse lookup.
    """
    __tablename__ = "urls"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # unique=True creates the index
    short_code = Column(String(32), unique=True, nullable=False)
    long_url = Column(Text, nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self) -> str:
        return f"<URLMapping {self.short_code} -> {self.long_url}>"
