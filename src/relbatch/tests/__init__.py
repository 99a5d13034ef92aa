"""relbatch.tests package"""

import json
import threading
import time
import unittest

from unittest import mock as _mock

mock = _mock


class TestCase(unittest.TestCase):
    """
    General tests.

    This class supplies some supporting help for assertions.
    """

    none = unittest.TestCase.assertIsNone

    def assertIsEmpty(self, container, msg=None):
        self.assertLength(container, 0, msg)

    assertEmpty = assertIsEmpty

    def assertLength(self, container, length, msg=None):
        self.assertEqual(len(container), length,
                         '%s -- %s' % (msg, container) if msg else container)


def make_records(count, start=0):
    return [{'id': i, 'name': 'item-%d' % i} for i in range(start, start + count)]


class MockCursor(object):
    closed = False
    rowcount = -1

    def __init__(self):
        self.executed = []
        self.results = []

    def execute(self, stmt, params=None):
        params = tuple(params) if isinstance(params, list) else params
        self.executed.append((stmt, params))

    def fetchall(self):
        r = self.results
        self.results = None
        return r

    def close(self):
        self.closed = True


class FakeDatabaseError(Exception):
    pass


class RecordingExecutor(object):
    """
    Records each payload it is given.

    Fails for the (zero-based) call numbers in *fail_on*. Returns the
    number of records in the payload, which must be a list or a JSON
    array. Safe to use from multiple threads; tracks how many calls
    were running at once.
    """

    def __init__(self, fail_on=(), delay=0, error=FakeDatabaseError,
                 on_call=None):
        self.fail_on = set(fail_on)
        self.delay = delay
        self.error = error
        self.on_call = on_call
        self.payloads = []
        self.calls = 0
        self.in_flight = 0
        self.max_in_flight = 0
        self._lock = threading.Lock()

    def __call__(self, payload):
        with self._lock:
            call = self.calls
            self.calls += 1
            self.payloads.append(payload)
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.on_call is not None:
                self.on_call(call)
            if self.delay:
                time.sleep(self.delay)
            if call in self.fail_on:
                raise self.error("Failed call %d" % call)
            if isinstance(payload, str):
                payload = json.loads(payload)
            return len(payload)
        finally:
            with self._lock:
                self.in_flight -= 1


__all__ = [
    'TestCase',
    'MockCursor',
    'RecordingExecutor',
    'FakeDatabaseError',
    'make_records',
    'mock',
]
