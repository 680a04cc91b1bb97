"""
Database session and connection pool setup
============================================

Pool parameters:
- pool_size: resident connections
- max_overflow: extra connections allowed at peak (pool_size + max_overflow)
- pool_recycle: recycle period, keeps MySQL wait_timeout from cutting idle connections
- pool_pre_ping: check liveness before handing a connection out
"""

import logging
import time
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from hostpanel.config import settings

logger = logging.getLogger("hostpanel.db")

POOL_SIZE = settings.DB_POOL_SIZE
MAX_OVERFLOW = settings.DB_MAX_OVERFLOW
POOL_RECYCLE = settings.DB_POOL_RECYCLE

# Slow query threshold (ms)
SLOW_QUERY_THRESHOLD_MS = settings.SLOW_QUERY_THRESHOLD_MS

engine = create_engine(
    settings.SQLALCHEMY_DATABASE_URI,
    pool_pre_ping=True,
    pool_size=POOL_SIZE,
    max_overflow=MAX_OVERFLOW,
    pool_recycle=POOL_RECYCLE,
)


# ---------------------------------------------------------------------------
# Slow query monitoring
# ---------------------------------------------------------------------------
def install_slow_query_monitor(target: Engine) -> None:
    """Log every statement slower than SLOW_QUERY_THRESHOLD_MS on the given engine."""

    @event.listens_for(target, "before_cursor_execute")
    def _before_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        conn.info.setdefault("query_start_time", []).append(time.perf_counter())

    @event.listens_for(target, "after_cursor_execute")
    def _after_cursor_execute(conn, cursor, statement, parameters, context, executemany):
        total_ms = (time.perf_counter() - conn.info["query_start_time"].pop()) * 1000

        if total_ms >= SLOW_QUERY_THRESHOLD_MS:
            # Truncate long SQL to keep log volume sane
            stmt_preview = statement[:500] + "..." if len(statement) > 500 else statement
            logger.warning(
                "Slow query detected",
                extra={
                    "duration_ms": round(total_ms, 2),
                    "statement": stmt_preview,
                    "threshold_ms": SLOW_QUERY_THRESHOLD_MS,
                },
            )


install_slow_query_monitor(engine)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_pool_status() -> dict:
    """Connection pool status (for /health)"""
    pool = engine.pool
    return {
        "pool_size": pool.size(),
        "checked_in": pool.checkedin(),
        "checked_out": pool.checkedout(),
        "overflow": pool.overflow(),
        "max_overflow": MAX_OVERFLOW,
        "pool_recycle": POOL_RECYCLE,
    }
