from sqlalchemy import create_engine, BigInteger, Integer
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from config.settings import settings

engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,
    pool_recycle=3600,
    future=True,
)

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False, future=True)

# BIGINT en MySQL/Postgres; INTEGER en SQLite para conservar el autoincremento (rowid)
IdType = BigInteger().with_variant(Integer, "sqlite")


class Base(DeclarativeBase):
    pass


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
