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


import logging
import os

from relbatch.tests import TestCase
from relbatch.tests import mock

from relbatch import _util


class TestIterChunks(TestCase):

    def _callFUT(self, iterable, size):
        return list(_util.iter_chunks(iterable, size))

    def test_empty(self):
        self.assertEqual(self._callFUT([], 3), [])

    def test_exact(self):
        self.assertEqual(self._callFUT(range(6), 3), [[0, 1, 2], [3, 4, 5]])

    def test_remainder(self):
        self.assertEqual(self._callFUT(range(7), 3), [[0, 1, 2], [3, 4, 5], [6]])

    def test_size_one(self):
        self.assertEqual(self._callFUT('abc', 1), [['a'], ['b'], ['c']])

    def test_larger_than_input(self):
        self.assertEqual(self._callFUT((1, 2), 100), [[1, 2]])

    def test_lazy(self):
        consumed = []

        def gen():
            for i in range(10):
                consumed.append(i)
                yield i

        chunks = _util.iter_chunks(gen(), 4)
        self.assertEqual(next(chunks), [0, 1, 2, 3])
        self.assertEqual(consumed, [0, 1, 2, 3])


class TestEnviron(TestCase):

    def test_positive_integer(self):
        with mock.patch.dict(os.environ, {'RELBATCH_TEST_VALUE': '42'}):
            self.assertEqual(
                _util.get_positive_integer_from_environ('RELBATCH_TEST_VALUE', 1),
                42)

    def test_positive_integer_missing(self):
        with mock.patch.dict(os.environ, {}):
            os.environ.pop('RELBATCH_TEST_VALUE', None)
            self.assertEqual(
                _util.get_positive_integer_from_environ('RELBATCH_TEST_VALUE', 7),
                7)

    def test_positive_integer_invalid(self):
        logger = mock.Mock()
        for value in ('0', '-1', 'many'):
            with self.subTest(value=value):
                with mock.patch.dict(os.environ, {'RELBATCH_TEST_VALUE': value}):
                    self.assertEqual(
                        _util.get_positive_integer_from_environ(
                            'RELBATCH_TEST_VALUE', 7, logger=logger),
                        7)
        self.assertEqual(logger.exception.call_count, 3)

    def test_float(self):
        with mock.patch.dict(os.environ, {'RELBATCH_TEST_VALUE': '0.5'}):
            self.assertEqual(
                _util.get_non_negative_float_from_environ('RELBATCH_TEST_VALUE', 1),
                0.5)

    def test_boolean(self):
        for value, expected in (('1', True), ('0', False), ('on', True), ('no', False)):
            with self.subTest(value=value):
                with mock.patch.dict(os.environ, {'RELBATCH_TEST_VALUE': value}):
                    self.assertIs(
                        _util.get_boolean_from_environ('RELBATCH_TEST_VALUE', None),
                        expected)


class TestByteDisplay(TestCase):

    def test_values(self):
        self.assertEqual(_util.byte_display(0), '0 KB')
        self.assertEqual(_util.byte_display(512), '512 bytes')
        self.assertEqual(_util.byte_display(2048), '2.00 KB')
        self.assertEqual(_util.byte_display(3 * 1048576), '3.00 MB')


class TestLogTimed(TestCase):

    def _make_func(self):
        def func(a):
            return a
        func.__module__ = __name__
        return func

    def test_logs_slow_calls(self):
        func = self._make_func()
        func.log_levels = [(logging.INFO, 0)]
        func.log_details_threshold = logging.ERROR
        log = mock.Mock()
        log.isEnabledFor.return_value = True
        _util.do_log_duration_info("Function %s took %.3fs.", func, (1,), {}, 1.5, log=log)
        log.log.assert_called_once()
        level, msg = log.log.call_args[0][:2]
        self.assertEqual(level, logging.INFO)
        self.assertEqual(msg, "Function %s took %.3fs.")

    def test_skips_fast_calls(self):
        func = self._make_func()
        func.log_levels = [(logging.INFO, 5)]
        func.log_details_threshold = logging.WARN
        log = mock.Mock()
        _util.do_log_duration_info("Function %s took %.3fs.", func, (1,), {}, 1.5, log=log)
        log.log.assert_not_called()

    def test_details_include_args(self):
        func = self._make_func()
        func.log_levels = [(logging.WARN, 0)]
        func.log_details_threshold = logging.WARN
        func.log_args_only_self = 1
        log = mock.Mock()
        log.isEnabledFor.return_value = True
        _util.do_log_duration_info("Function %s took %.3fs.", func,
                                   ('self', 'arg'), {'k': 1}, 10, log=log)
        args = log.log.call_args[0]
        self.assertIn('(args=%r kwargs=%r)', args[1])
        self.assertEqual(args[-2:], (('self',), {}))

    def test_decorator_returns_result(self):
        decorated = _util.log_timed(self._make_func())
        self.assertEqual(decorated(42), 42)
