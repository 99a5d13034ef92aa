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
Tests for the single-parameter statement builders.
"""

from hamcrest import assert_that
from nti.testing.matchers import validly_provides

from relbatch.tests import TestCase
from relbatch.interfaces import IStatementBuilder

from ..statements import JsonStatementBuilder
from ..statements import normalize_columns
from ..postgresql import PostgreSQLStatementBuilder
from ..mysql import MySQLStatementBuilder
from ..sqlite import Sqlite3StatementBuilder


class TestNormalizeColumns(TestCase):

    def test_names_and_pairs(self):
        self.assertEqual(
            normalize_columns(['id', ('name', 'text')]),
            [('id', None), ('name', 'text')])

    def test_empty(self):
        with self.assertRaises(ValueError):
            normalize_columns(())


class TestJsonStatementBuilder(TestCase):

    def test_abstract(self):
        builder = JsonStatementBuilder()
        with self.assertRaises(NotImplementedError):
            builder.insert('item', ['id'])
        with self.assertRaises(NotImplementedError):
            builder.update('item', ['name'], ['id'])
        with self.assertRaises(NotImplementedError):
            builder.delete('item', ['id'])

    def test_placeholder(self):
        self.assertEqual(JsonStatementBuilder().placeholder, '%s')
        self.assertEqual(JsonStatementBuilder(':1').placeholder, ':1')


class TestPostgreSQLStatementBuilder(TestCase):

    columns = [('id', 'bigint'), ('name', 'text')]
    keys = [('id', 'bigint')]

    def _makeOne(self):
        return PostgreSQLStatementBuilder()

    def test_provides(self):
        assert_that(self._makeOne(), validly_provides(IStatementBuilder))

    def test_insert(self):
        self.assertEqual(
            self._makeOne().insert('item', self.columns),
            "INSERT INTO item (id, name)\n"
            "SELECT r.id, r.name FROM json_to_recordset(%s::json) AS r(id bigint, name text)"
        )

    def test_insert_suffix(self):
        stmt = self._makeOne().insert('item', self.columns,
                                      'ON CONFLICT (id) DO NOTHING')
        self.assertTrue(stmt.endswith('AS r(id bigint, name text)\nON CONFLICT (id) DO NOTHING'))

    def test_insert_needs_types(self):
        with self.assertRaises(ValueError):
            self._makeOne().insert('item', ['id'])

    def test_update(self):
        self.assertEqual(
            self._makeOne().update('item', [('name', 'text')], self.keys),
            "UPDATE item SET name = r.name\n"
            "FROM json_to_recordset(%s::json) AS r(id bigint, name text)\n"
            "WHERE item.id = r.id"
        )

    def test_delete(self):
        self.assertEqual(
            self._makeOne().delete('item', self.keys),
            "DELETE FROM item\n"
            "USING json_to_recordset(%s::json) AS r(id bigint)\n"
            "WHERE item.id = r.id"
        )

    def test_delete_composite_key(self):
        stmt = self._makeOne().delete('item', [('id', 'bigint'), ('tid', 'bigint')])
        self.assertTrue(stmt.endswith("WHERE item.id = r.id AND item.tid = r.tid"))

    def test_select(self):
        self.assertEqual(
            self._makeOne().select(['id', 'name'], 'item', self.keys),
            "SELECT item.id, item.name FROM item\n"
            "JOIN json_to_recordset(%s::json) AS r(id bigint) ON item.id = r.id"
        )

    def test_any(self):
        builder = self._makeOne()
        self.assertEqual(builder.select_any(['id', 'name'], 'item', 'id'),
                         "SELECT id, name FROM item WHERE id = ANY (%s)")
        self.assertEqual(builder.delete_any('item', 'id'),
                         "DELETE FROM item WHERE id = ANY (%s)")


class TestMySQLStatementBuilder(TestCase):

    columns = [('id', 'BIGINT'), ('name', 'TEXT')]
    keys = [('id', 'BIGINT')]

    def _makeOne(self):
        return MySQLStatementBuilder()

    def test_provides(self):
        assert_that(self._makeOne(), validly_provides(IStatementBuilder))

    def test_insert(self):
        self.assertEqual(
            self._makeOne().insert('item', self.columns),
            "INSERT INTO item (id, name)\n"
            "SELECT r.id, r.name FROM JSON_TABLE(%s, '$[*]' COLUMNS "
            "(id BIGINT PATH '$.id', name TEXT PATH '$.name')) AS r"
        )

    def test_update(self):
        self.assertEqual(
            self._makeOne().update('item', [('name', 'TEXT')], self.keys),
            "UPDATE item\n"
            "JOIN JSON_TABLE(%s, '$[*]' COLUMNS "
            "(id BIGINT PATH '$.id', name TEXT PATH '$.name')) AS r ON item.id = r.id\n"
            "SET item.name = r.name"
        )

    def test_delete(self):
        self.assertEqual(
            self._makeOne().delete('item', self.keys),
            "DELETE item FROM item\n"
            "JOIN JSON_TABLE(%s, '$[*]' COLUMNS (id BIGINT PATH '$.id')) AS r "
            "ON item.id = r.id"
        )

    def test_needs_types(self):
        with self.assertRaises(ValueError):
            self._makeOne().delete('item', ['id'])


class TestSqlite3StatementBuilder(TestCase):

    def _makeOne(self):
        return Sqlite3StatementBuilder()

    def test_provides(self):
        builder = self._makeOne()
        assert_that(builder, validly_provides(IStatementBuilder))
        self.assertEqual(builder.placeholder, '?')

    def test_insert(self):
        self.assertEqual(
            self._makeOne().insert('item', ['id', 'name']),
            "INSERT INTO item (id, name)\n"
            "SELECT json_extract(r.value, '$.id'), json_extract(r.value, '$.name') "
            "FROM json_each(?) AS r"
        )

    def test_update(self):
        self.assertEqual(
            self._makeOne().update('item', ['name'], ['id']),
            "UPDATE item SET name = json_extract(r.value, '$.name')\n"
            "FROM json_each(?) AS r\n"
            "WHERE item.id = json_extract(r.value, '$.id')"
        )

    def test_delete(self):
        self.assertEqual(
            self._makeOne().delete('item', ['id']),
            "DELETE FROM item\n"
            "WHERE EXISTS (SELECT 1 FROM json_each(?) AS r "
            "WHERE item.id = json_extract(r.value, '$.id'))"
        )

    def test_select(self):
        self.assertEqual(
            self._makeOne().select(['id', 'name'], 'item', ['id']),
            "SELECT item.id, item.name FROM item\n"
            "JOIN json_each(?) AS r ON item.id = json_extract(r.value, '$.id')"
        )
