"""Calculation history on PostgreSQL (``postgres://`` DSNs are normalised)."""

from __future__ import annotations

from fx_lira.db.relational_backend import RelationalBackend


class PostgresBackend(RelationalBackend):
    """Stores calculations through psycopg2; needs the ``postgres`` extra."""


__all__ = ["PostgresBackend"]
