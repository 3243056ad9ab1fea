"""
Conexión a base de datos PostgreSQL

Este módulo centraliza TODAS las formas de acceso a la base de datos:
- SQLAlchemy (schema definition and table creation)
- psycopg2 directo (raw SQL used by the repositories)

Author: TM3
"""
import logging
import time
from contextlib import contextmanager

import psycopg2
from psycopg2.extras import RealDictCursor, register_uuid
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base

from .config import settings
from .exceptions import RepositoryError

logger = logging.getLogger(__name__)

# uuid.UUID <-> uuid columns
register_uuid()


# ============================================================================
# SQLAlchemy Configuration (schema only)
# ============================================================================

# SQLAlchemy Engine (connects lazily, only init_db uses it)
engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,  # Verificar conexión antes de usar
)

# Base para modelos
Base = declarative_base()


def init_db():
    """
    Create every table declared in storefront.models

    Safe to call repeatedly: existing tables are left untouched.
    """
    # Import models so they register on Base.metadata
    from storefront import models  # noqa: F401

    logger.info("Creating database tables")
    Base.metadata.create_all(bind=engine)


# ============================================================================
# psycopg2 Direct Connections (for raw SQL queries)
# ============================================================================

def get_db_connection_dict():
    """
    Get a database connection with RealDictCursor (returns dictionaries)

    Returns:
        psycopg2 connection with RealDictCursor

    Raises:
        RepositoryError if DATABASE_URL is not configured
    """
    database_url = settings.DATABASE_URL
    if not database_url:
        raise RepositoryError("DATABASE_URL not configured")

    return psycopg2.connect(database_url, cursor_factory=RealDictCursor)


@contextmanager
def transaction():
    """
    Run a unit of work on its own connection

    Yields a RealDictCursor. Commits when the block finishes, rolls back when
    it raises. psycopg2 errors are re-raised as RepositoryError with the
    original exception chained.

    Example:
        with transaction() as cursor:
            cursor.execute("SELECT * FROM orders WHERE id = %s", (order_id,))
            row = cursor.fetchone()
    """
    try:
        conn = get_db_connection_dict()
    except psycopg2.Error as e:
        raise RepositoryError("failed to connect to database") from e

    cursor = conn.cursor()
    try:
        yield cursor
        conn.commit()
    except psycopg2.Error as e:
        conn.rollback()
        raise RepositoryError(f"database operation failed: {e.pgcode or type(e).__name__}") from e
    except Exception:
        conn.rollback()
        raise
    finally:
        cursor.close()
        conn.close()


def contains_pattern(text: str) -> str:
    """
    Build an ILIKE pattern matching text literally anywhere in a column

    % and _ typed by the user are escaped with backslash, the default LIKE
    escape character in PostgreSQL.
    """
    escaped = text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


# ============================================================================
# Database Connection with Retry Logic (health probe)
# ============================================================================

def get_db_connection_with_retry(max_retries=3, retry_delay=1.0):
    """
    Get a psycopg2 connection with automatic retry on connection failures

    Only the health endpoint uses this. Business operations never retry.

    Args:
        max_retries: Maximum number of connection attempts (default: 3)
        retry_delay: Initial delay between retries in seconds (default: 1.0)

    Returns:
        psycopg2 connection object

    Raises:
        psycopg2.OperationalError: If all retry attempts fail
    """
    last_error = None

    for attempt in range(1, max_retries + 1):
        try:
            logger.debug(f"Database connection attempt {attempt}/{max_retries}")
            conn = psycopg2.connect(settings.DATABASE_URL)
            logger.debug(f"Database connection successful on attempt {attempt}")
            return conn

        except psycopg2.OperationalError as e:
            last_error = e
            logger.warning(f"Connection error on attempt {attempt}/{max_retries}: {e}")

            if attempt < max_retries:
                # Exponential backoff
                delay = retry_delay * (2 ** (attempt - 1))
                logger.info(f"Retrying in {delay:.2f} seconds...")
                time.sleep(delay)

    logger.error(f"All {max_retries} connection attempts failed")
    raise last_error
