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
Generic single-parameter statement building.

Each statement reads its rows from one JSON array bound as the only
parameter, as produced by :class:`relbatch.encoding.JsonArrayEncoder`.
Subclasses say how the database turns that parameter into a row
source (:meth:`JsonStatementBuilder._source`) and how a field of a
source row is referenced (:meth:`JsonStatementBuilder._ref`).

Fields are referenced by name, so payloads must be arrays of objects;
the rows produced by ``JsonArrayEncoder(as_rows=True)`` are not
understood.
"""

from zope.interface import implementer

from relbatch.interfaces import IStatementBuilder


def normalize_columns(columns):
    """
    Return a list of ``(name, sql_type)`` pairs.

    Plain strings are accepted as names with no type.
    """
    result = []
    for column in columns:
        if isinstance(column, str):
            result.append((column, None))
        else:
            name, sql_type = column
            result.append((name, sql_type))
    if not result:
        raise ValueError("At least one column is required")
    return result


@implementer(IStatementBuilder)
class JsonStatementBuilder(object):
    """
    Generic statement builder.

    ``insert`` and ``select`` use only standard SQL around the row
    source; ``update`` and ``delete`` differ too much between databases
    and must be provided by subclasses.
    """

    placeholder = '%s'
    # The alias given to the row source.
    alias = 'r'

    def __init__(self, placeholder=None):
        if placeholder is not None:
            self.placeholder = placeholder

    def __repr__(self):
        return "<%s placeholder=%r>" % (type(self).__name__, self.placeholder)

    def _source(self, columns):
        """
        Return the FROM-clause item that expands the payload parameter
        into rows having *columns*.
        """
        raise NotImplementedError

    def _ref(self, name):
        return '%s.%s' % (self.alias, name)

    def _match(self, table, key_columns):
        return ' AND '.join(
            '%s.%s = %s' % (table, name, self._ref(name))
            for name, _ in key_columns
        )

    def insert(self, table, columns, suffix=''):
        columns = normalize_columns(columns)
        stmt = "INSERT INTO %s (%s)\nSELECT %s FROM %s" % (
            table,
            ', '.join(name for name, _ in columns),
            ', '.join(self._ref(name) for name, _ in columns),
            self._source(columns),
        )
        # e.g.,
        # INSERT INTO table (c1, c2)
        # SELECT r.c1, r.c2 FROM <source>
        # <suffix>
        if suffix:
            stmt += '\n' + suffix
        return stmt

    def select(self, select_columns, table, key_columns):
        key_columns = normalize_columns(key_columns)
        return "SELECT %s FROM %s\nJOIN %s ON %s" % (
            ', '.join('%s.%s' % (table, name) for name in select_columns),
            table,
            self._source(key_columns),
            self._match(table, key_columns),
        )

    def update(self, table, columns, key_columns):
        raise NotImplementedError

    def delete(self, table, key_columns):
        raise NotImplementedError
