from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
import logging

from quizbank.models.orm import Base

logger = logging.getLogger(__name__)

def create_db_engine(url: str, echo: bool = False) -> Engine:
    connect_args = {}
    if url.startswith("sqlite"):
        # Sessions are opened from the request threadpool
        connect_args["check_same_thread"] = False
    return create_engine(url, echo=echo, future=True, pool_pre_ping=True, connect_args=connect_args)

def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False, future=True)

def init_db(engine: Engine) -> None:
    """Check connectivity and create tables if they don't exist."""
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    # In production, use migrations instead
    Base.metadata.create_all(engine)
    logger.info(f"Database ready at {engine.url.render_as_string(hide_password=True)}")

def close_db(engine: Engine) -> None:
    engine.dispose()
