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
MySQL statements.

These need ``JSON_TABLE``, which is available in MySQL 8.0 and later.
"""

from relbatch.adapters.statements import JsonStatementBuilder
from relbatch.adapters.statements import normalize_columns


class MySQLStatementBuilder(JsonStatementBuilder):
    """
    Expands the payload with ``JSON_TABLE``.

    Every column needs a SQL type, e.g. ``('zoid', 'BIGINT')``. Keep
    the whole statement, including the payload, under the server's
    ``max_allowed_packet``.
    """

    def _source(self, columns):
        definitions = []
        for name, sql_type in columns:
            if not sql_type:
                raise ValueError("A SQL type is required for column %r" % (name,))
            definitions.append("%s %s PATH '$.%s'" % (name, sql_type, name))
        return "JSON_TABLE(%s, '$[*]' COLUMNS (%s)) AS %s" % (
            self.placeholder,
            ', '.join(definitions),
            self.alias,
        )

    def update(self, table, columns, key_columns):
        columns = normalize_columns(columns)
        key_columns = normalize_columns(key_columns)
        return "UPDATE %s\nJOIN %s ON %s\nSET %s" % (
            table,
            self._source(key_columns + columns),
            self._match(table, key_columns),
            ', '.join('%s.%s = %s' % (table, name, self._ref(name)) for name, _ in columns),
        )

    def delete(self, table, key_columns):
        key_columns = normalize_columns(key_columns)
        return "DELETE %s FROM %s\nJOIN %s ON %s" % (
            table,
            table,
            self._source(key_columns),
            self._match(table, key_columns),
        )
