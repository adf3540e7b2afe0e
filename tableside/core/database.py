from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from tableside.core.config import DATABASE_URL

_connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(DATABASE_URL, connect_args=_connect_args, pool_pre_ping=True)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()

# Upper bound for integer columns and ids taken from requests.
MAX_INTEGER = 2**31 - 1


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
