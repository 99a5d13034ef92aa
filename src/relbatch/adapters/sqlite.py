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
SQLite statements, using the JSON1 functions.

SQLite's default limit on host parameters is 999 (32766 since 3.32),
so it benefits from single-parameter batches as much as anything.
"""

from relbatch.adapters.statements import JsonStatementBuilder
from relbatch.adapters.statements import normalize_columns


class Sqlite3StatementBuilder(JsonStatementBuilder):
    """
    Expands the payload with ``json_each``; each field is extracted
    with ``json_extract``. Column types are ignored.

    ``update`` needs ``UPDATE ... FROM``, added in SQLite 3.33.
    """

    placeholder = '?'

    def _source(self, columns):
        return "json_each(%s) AS %s" % (self.placeholder, self.alias)

    def _ref(self, name):
        return "json_extract(%s.value, '$.%s')" % (self.alias, name)

    def update(self, table, columns, key_columns):
        columns = normalize_columns(columns)
        key_columns = normalize_columns(key_columns)
        return "UPDATE %s SET %s\nFROM %s\nWHERE %s" % (
            table,
            ', '.join('%s = %s' % (name, self._ref(name)) for name, _ in columns),
            self._source(key_columns + columns),
            self._match(table, key_columns),
        )

    def delete(self, table, key_columns):
        key_columns = normalize_columns(key_columns)
        return "DELETE FROM %s\nWHERE EXISTS (SELECT 1 FROM %s WHERE %s)" % (
            table,
            self._source(key_columns),
            self._match(table, key_columns),
        )
