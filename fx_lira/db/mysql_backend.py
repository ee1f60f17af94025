"""Calculation history on MySQL (``mysql://`` or ``mysql+pymysql://``)."""

from __future__ import annotations

from fx_lira.db.relational_backend import RelationalBackend


class MySQLBackend(RelationalBackend):
    """Stores calculations through SQLAlchemy's MySQL dialect; needs the ``mysql`` extra."""


__all__ = ["MySQLBackend"]
