import logging

from sqlalchemy import create_engine
from sqlalchemy.engine import URL

from concierge import config

log = logging.getLogger(__name__)


def build_connection_url(settings) -> str:
    """Resolve the SQLAlchemy URL from DATABASE_URL or the individual DB_* settings."""
    if settings.DATABASE_URL:
        connection_url = settings.DATABASE_URL
        # Heroku/Render style URLs and psycopg3 names are normalised to psycopg2
        if connection_url.startswith("postgres://"):
            connection_url = connection_url.replace("postgres://", "postgresql+psycopg2://", 1)
        elif connection_url.startswith("postgresql://"):
            connection_url = connection_url.replace("postgresql://", "postgresql+psycopg2://", 1)
        elif connection_url.startswith("postgresql+psycopg:"):
            connection_url = connection_url.replace("postgresql+psycopg:", "postgresql+psycopg2:", 1)
        return connection_url

    query = {}
    if settings.DB_SSL == "true":
        query["sslmode"] = "require"
    elif settings.DB_SSL == "false":
        query["sslmode"] = "disable"

    url = URL.create(
        "postgresql+psycopg2",
        username=settings.DB_USER,
        password=settings.DB_PASSWORD or None,
        host=settings.DB_HOST,
        port=settings.DB_PORT,
        database=settings.DB_NAME,
        query=query,
    )
    return url.render_as_string(hide_password=False)


def make_engine(settings):
    connection_url = build_connection_url(settings)

    if connection_url.startswith("sqlite"):
        # Local development and tests; the request threadpool shares connections
        return create_engine(connection_url, connect_args={"check_same_thread": False})

    return create_engine(
        connection_url,
        pool_pre_ping=True,  # Verify connections before using
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        pool_recycle=300,
        echo=False,
    )


engine = make_engine(config.get_settings())

log.info(f"[Database] SQLAlchemy engine created for dialect={engine.dialect.name}")
