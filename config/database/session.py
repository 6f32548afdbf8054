import os
import urllib.parse

from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

load_dotenv()


def build_database_url() -> str:
    # SQL_USER, SQL_PASSWORD, SQL_HOST, SQL_PORT, SQL_DATABASE
    explicit = os.getenv("DATABASE_URL")
    if explicit:
        return explicit
    password = urllib.parse.quote_plus(os.getenv("SQL_PASSWORD", ""))
    return (
        f"postgresql+psycopg2://{os.getenv('SQL_USER', 'postgres')}:{password}"
        f"@{os.getenv('SQL_HOST', 'localhost')}:{os.getenv('SQL_PORT', '5432')}"
        f"/{os.getenv('SQL_DATABASE', 'video_analytics')}"
    )


engine = create_engine(
    build_database_url(),
    echo=os.getenv("SQL_ECHO", "false").lower() == "true",
    pool_pre_ping=True,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()


def init_db_schema():
    """
    Creates the user/API-key tables when they are missing.
    """
    import analytics.infrastructure.orm.models  # noqa: F401  registers tables on Base

    Base.metadata.create_all(bind=engine)
