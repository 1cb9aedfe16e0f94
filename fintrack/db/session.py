from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fintrack.core.config import settings


def build_engine(url: str):
    if url.startswith("sqlite"):
        # In-memory sqlite must share one connection across threads
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url or url == "sqlite://":
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)
    return create_engine(
        url,
        pool_size=20,
        max_overflow=30,
        pool_recycle=300,      # Recycle connections every 5 minutes
        pool_pre_ping=True,
        pool_timeout=45,
        echo=False,
    )


engine = build_engine(settings.SQLALCHEMY_DATABASE_URI)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
