from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

import mysql.connector

from ..core.exceptions import StoreError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Open a connection, yield (conn, cursor), commit on success.

    Any error rolls the transaction back. Driver errors surface as StoreError;
    domain errors raised inside the block propagate unchanged.
    """
    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as exc:
        raise StoreError(f"Database unavailable: {exc}") from exc

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as exc:
        _rollback(conn)
        raise StoreError(f"Database error: {exc}") from exc
    except Exception:
        _rollback(conn)
        raise
    finally:
        conn.close()


def _rollback(conn) -> None:
    try:
        conn.rollback()
    except mysql.connector.Error:
        logger.exception("Rollback failed")


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def lock_clause(for_update: bool) -> str:
    return " FOR UPDATE" if for_update else ""
