from datetime import datetime, timezone

from sqlalchemy.orm import declarative_base


Base = declarative_base()


def utcnow() -> datetime:
    # naive UTC; sqlite drops tzinfo anyway
    return datetime.now(timezone.utc).replace(tzinfo=None)
