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
Encoders that turn a batch of records into one bindable value.

The database parses the payload back into rows on its side
(``json_to_recordset`` in PostgreSQL, ``JSON_TABLE`` in MySQL 8,
``json_each`` in SQLite), so however many records a batch holds, the
statement only ever has one bind parameter.
"""

import datetime
import decimal
import json
import uuid

from collections.abc import Mapping

from zope.interface import implementer

from relbatch.interfaces import IRecordEncoder

__all__ = [
    'JsonArrayEncoder',
    'ValueListEncoder',
    'encode_json_array',
    'json_default',
]


def json_default(value):
    """
    The ``default`` hook for :func:`json.dumps`.

    Handles the common column types the :mod:`json` module does not.
    Anything else raises :exc:`TypeError`.
    """
    if isinstance(value, (datetime.datetime, datetime.date, datetime.time)):
        return value.isoformat()
    if isinstance(value, (decimal.Decimal, uuid.UUID)):
        # As strings; converting a Decimal to a float would lose precision
        # and the database casts text to numeric exactly.
        return str(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        # PostgreSQL's hex format for bytea input.
        return '\\x' + bytes(value).hex()
    if isinstance(value, Mapping):
        return dict(value)
    raise TypeError("Object of type %s is not JSON serializable" % (type(value).__name__,))


@implementer(IRecordEncoder)
class JsonArrayEncoder(object):
    """
    Serializes a batch of records as a compact JSON array of objects.

    If *columns* is given, each record is projected onto exactly those
    keys, in that order; a record missing one of them is an encoding
    error. With *as_rows*, records are written as arrays of values in
    *columns* order instead of objects, which makes much smaller
    payloads for wide batches. The statement builders in
    :mod:`relbatch.adapters` read fields by name, so a row payload
    needs hand-written SQL that reads fields by position (for example
    ``json_extract(r.value, '$[0]')`` in SQLite or ``PATH '$[0]'`` in
    MySQL's ``JSON_TABLE``).
    """

    def __init__(self, columns=None, as_rows=False, sort_keys=False):
        if as_rows and not columns:
            raise ValueError("as_rows requires columns")
        self.columns = tuple(columns) if columns else None
        self.as_rows = as_rows
        self.sort_keys = sort_keys

    def __repr__(self):
        return "<%s columns=%r as_rows=%s>" % (
            type(self).__name__, self.columns, self.as_rows
        )

    def _project(self, records):
        columns = self.columns
        if not columns:
            return list(records)
        if self.as_rows:
            return [[record[c] for c in columns] for record in records]
        return [{c: record[c] for c in columns} for record in records]

    def __call__(self, records):
        return json.dumps(
            self._project(records),
            default=json_default,
            separators=(',', ':'),
            sort_keys=self.sort_keys,
            # A cycle raises ValueError rather than recursing forever.
            check_circular=True,
            allow_nan=False,
        )


#: The default encoder.
encode_json_array = JsonArrayEncoder()


@implementer(IRecordEncoder)
class ValueListEncoder(object):
    """
    Produces a plain list of the values of one *column*.

    Drivers such as psycopg2 adapt a Python list to a SQL array, so the
    list binds as one parameter of ``col = ANY (%s)``. If *column* is
    None, the records are taken to be the values themselves.
    """

    def __init__(self, column=None):
        self.column = column

    def __call__(self, records):
        column = self.column
        if column is None:
            return list(records)
        return [record[column] for record in records]
