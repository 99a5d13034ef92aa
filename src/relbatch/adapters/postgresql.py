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
PostgreSQL statements.

PostgreSQL limits a statement to 65535 bind parameters. A
``VALUES (%s, %s), (%s, %s), ...`` insert of a wide table runs into
that after a few thousand rows; binding the whole batch as one JSON
value and expanding it with ``json_to_recordset`` does not.
"""

from relbatch.adapters.statements import JsonStatementBuilder
from relbatch.adapters.statements import normalize_columns


class PostgreSQLStatementBuilder(JsonStatementBuilder):
    """
    Uses ``json_to_recordset`` for JSON payloads, and ``= ANY (%s)``
    for single column filters given as a list (see
    :class:`relbatch.encoding.ValueListEncoder`).

    Every column needs a SQL type, e.g. ``('zoid', 'bigint')``.
    """

    def _source(self, columns):
        definitions = []
        for name, sql_type in columns:
            if not sql_type:
                raise ValueError("A SQL type is required for column %r" % (name,))
            definitions.append('%s %s' % (name, sql_type))
        return "json_to_recordset(%s::json) AS %s(%s)" % (
            self.placeholder,
            self.alias,
            ', '.join(definitions),
        )

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
        return "DELETE FROM %s\nUSING %s\nWHERE %s" % (
            table,
            self._source(key_columns),
            self._match(table, key_columns),
        )

    def select_any(self, select_columns, table, filter_column):
        return "SELECT %s FROM %s WHERE %s = ANY (%s)" % (
            ', '.join(select_columns), table, filter_column, self.placeholder
        )

    def delete_any(self, table, filter_column):
        return "DELETE FROM %s WHERE %s = ANY (%s)" % (
            table, filter_column, self.placeholder
        )
