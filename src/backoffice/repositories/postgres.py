# Backoffice/src/backoffice/repositories/postgres.py
# @ai-rules:
# 1. [Pattern]: Every repository call checks out ONE pooled connection, commits on success, rolls back on error.
# 2. [Constraint]: Connections are always returned to the pool in finally -- never hold one across calls.
# 3. [Gotcha]: id columns are UUID. A non-UUID id string must be treated as a miss, not sent to PostgreSQL.
"""Shared PostgreSQL plumbing for the repositories: pool checkout and schema bootstrap."""

import logging
import uuid
from contextlib import contextmanager
from typing import Iterator, Optional

from psycopg2.pool import SimpleConnectionPool

logger = logging.getLogger(__name__)


SCHEMA_STATEMENTS = (
    '''
    CREATE TABLE IF NOT EXISTS products (
        id UUID PRIMARY KEY,
        name VARCHAR(255) NOT NULL,
        description TEXT DEFAULT '',
        price DOUBLE PRECISION NOT NULL CHECK (price >= 0),
        stock INTEGER NOT NULL DEFAULT 0 CHECK (stock >= 0),
        category VARCHAR(255),
        marca VARCHAR(255),
        image_url TEXT,
        created_at TIMESTAMP DEFAULT NOW()
    )
    ''',
    '''
    CREATE TABLE IF NOT EXISTS orders (
        id UUID PRIMARY KEY,
        producto VARCHAR(255) NOT NULL,
        descripcion TEXT NOT NULL,
        cantidad INTEGER NOT NULL CHECK (cantidad >= 1),
        precio DOUBLE PRECISION NOT NULL CHECK (precio >= 0),
        descuento DOUBLE PRECISION NOT NULL DEFAULT 0 CHECK (descuento >= 0 AND descuento <= 100),
        total DOUBLE PRECISION NOT NULL CHECK (total >= 0),
        cliente VARCHAR(255) NOT NULL,
        estado VARCHAR(20) NOT NULL DEFAULT 'pendiente',
        fecha_entrega TIMESTAMP WITH TIME ZONE NOT NULL,
        created_at TIMESTAMP DEFAULT NOW()
    )
    ''',
    "CREATE INDEX IF NOT EXISTS orders_estado_idx ON orders (estado)",
    '''
    CREATE TABLE IF NOT EXISTS cupons (
        id UUID PRIMARY KEY,
        codigo VARCHAR(50) NOT NULL UNIQUE,
        descuento DOUBLE PRECISION NOT NULL CHECK (descuento >= 0 AND descuento <= 100),
        fecha_expiracion TIMESTAMP WITH TIME ZONE NOT NULL,
        activo BOOLEAN NOT NULL DEFAULT TRUE,
        uso_maximo INTEGER NOT NULL CHECK (uso_maximo >= 1),
        uso_actual INTEGER NOT NULL DEFAULT 0 CHECK (uso_actual >= 0),
        created_at TIMESTAMP DEFAULT NOW()
    )
    ''',
    '''
    CREATE TABLE IF NOT EXISTS admin_settings (
        id INTEGER PRIMARY KEY CHECK (id = 1),
        password_hash TEXT NOT NULL
    )
    ''',
)


def is_uuid(value: str) -> bool:
    try:
        uuid.UUID(str(value))
    except ValueError:
        return False
    return True


def init_schema(pool: SimpleConnectionPool, admin_password_hash: Optional[str] = None) -> None:
    """Create tables if missing and seed the admin credential on first boot."""
    conn = pool.getconn()
    try:
        with conn.cursor() as cur:
            for statement in SCHEMA_STATEMENTS:
                cur.execute(statement)
            if admin_password_hash:
                cur.execute(
                    "INSERT INTO admin_settings (id, password_hash) VALUES (1, %s) "
                    "ON CONFLICT (id) DO NOTHING",
                    (admin_password_hash,)
                )
        conn.commit()
        logger.info("Database initialized: 'products', 'orders', 'cupons', 'admin_settings' tables created or verified.")
    except Exception:
        conn.rollback()
        raise
    finally:
        pool.putconn(conn)


class PostgresRepository:
    """Base class for repositories backed by a psycopg2 connection pool."""

    def __init__(self, pool: SimpleConnectionPool):
        self.pool = pool

    @contextmanager
    def _cursor(self) -> Iterator:
        conn = self.pool.getconn()
        try:
            with conn.cursor() as cur:
                yield cur
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            self.pool.putconn(conn)
