"""fluentql execution layer.

:class:`Database` is the interface the query facade executes through. The
SQLAlchemy implementation lives in :mod:`fluentql.execute.engine` and needs
the ``sqlalchemy`` extra.
"""
from fluentql.execute.base import Database, Row

__all__ = ["Database", "Row"]
