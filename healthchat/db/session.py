from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from healthchat.core.config import get_database_url

DB_URL = get_database_url()
engine = create_engine(DB_URL, connect_args={"check_same_thread": False} if DB_URL.startswith("sqlite") else {})
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)

Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
