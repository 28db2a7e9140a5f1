from __future__ import annotations

import asyncio
import functools
import logging
from contextlib import contextmanager
from typing import Any, Callable, Dict, List, Optional, TypeVar

import mysql.connector

from ..core.exceptions import EventStoreError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)

T = TypeVar("T")


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


async def run_blocking(func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """Run a blocking connector call off the event loop.

    mysql.connector errors come back as EventStoreError so callers only see
    the store's own failure type.
    """
    try:
        return await asyncio.to_thread(functools.partial(func, *args, **kwargs))
    except mysql.connector.Error as e:
        logger.error("MySQL call %s failed: %s", getattr(func, "__name__", func), e)
        raise EventStoreError(str(e)) from e
