##############################################################################
#
# Copyright (c) 2026 Zope Foundation and Contributors.
# All Rights Reserved.
#
# This software is subject to the provisions of the Zope Public License,
# Version 2.1 (ZPL).  A copy of the ZPL should accompany this distribution.
# THIS SOFTWARE IS PROVIDED "AS IS" AND ANY AND ALL EXPRESS OR IMPLIED
# WARRANTIES ARE DISCLAIMED, INCLUDING, BUT NOT LIMITED TO, THE IMPLIED
# WARRANTIES OF TITLE, MERCHANTABILITY, AGAINST INFRINGEMENT, AND FITNESS
# FOR A PARTICULAR PURPOSE.
#
##############################################################################
"""
Executing payloads with a DB-API cursor.
"""

from zope.interface import implementer

from relbatch.interfaces import IPayloadExecutor
from relbatch.result import ExecuteResult


@implementer(IPayloadExecutor)
class CursorExecutor(object):
    """
    Binds each payload as the only parameter of *statement*.

    Give either a *cursor*, used for every batch, or a
    *cursor_factory*, called to get a fresh cursor for each batch
    (which is then closed). DB-API cursors generally must not be
    shared between threads, so use a factory when the dispatcher's
    concurrency is greater than 1.

    If *fetch* is true, the rows the statement produces are fetched
    and returned; do this for ``SELECT`` and ``RETURNING`` statements.

    Transactions are the caller's business; nothing is committed here.
    """

    def __init__(self, statement, cursor=None, cursor_factory=None, fetch=False):
        if (cursor is None) == (cursor_factory is None):
            raise ValueError("Give exactly one of cursor or cursor_factory")
        self.statement = statement
        self.cursor = cursor
        self.cursor_factory = cursor_factory
        self.fetch = fetch

    def __repr__(self):
        return "<%s fetch=%s statement=%r>" % (
            type(self).__name__, self.fetch, self.statement
        )

    def __call__(self, payload):
        if self.cursor is not None:
            return self._execute(self.cursor, payload)

        cursor = self.cursor_factory()
        try:
            return self._execute(cursor, payload)
        finally:
            cursor.close()

    def _execute(self, cursor, payload):
        __traceback_info__ = self.statement
        cursor.execute(self.statement, (payload,))
        rows = tuple(cursor.fetchall()) if self.fetch else ()
        rowcount = getattr(cursor, 'rowcount', None)
        if rowcount is None or rowcount < 0:
            # Unknown; -1 per the DB-API. Some drivers report this
            # for SELECT.
            rowcount = len(rows)
        return ExecuteResult(rowcount, rows)
