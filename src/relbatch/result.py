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
Per-batch outcomes and their aggregation.
"""

import threading
from collections import namedtuple

from zope.interface import implementer

from relbatch.interfaces import IBatchOutcome
from relbatch.interfaces import IOperationResult
from relbatch.options import FAIL_FAST

SUCCEEDED = 'succeeded'
FAILED = 'failed'
NOT_ATTEMPTED = 'not_attempted'


class ExecuteResult(namedtuple('ExecuteResult', ('rowcount', 'rows'))):
    """
    A structured raw result an executor may return.

    *rowcount* is the number of rows affected; *rows* is a sequence
    of rows returned by the statement (possibly empty).
    """
    __slots__ = ()

    def __new__(cls, rowcount=0, rows=()):
        return super(ExecuteResult, cls).__new__(cls, rowcount, rows)


def interpret_raw_result(raw):
    """
    Return ``(rowcount, rows)`` for a raw executor result.
    """
    if raw is None:
        return 0, ()
    if isinstance(raw, ExecuteResult):
        return raw.rowcount, tuple(raw.rows)
    if isinstance(raw, int) and not isinstance(raw, bool):
        return raw, ()
    if isinstance(raw, (list, tuple)):
        return len(raw), tuple(raw)
    # Something only the caller understands. It's still available
    # as the outcome's ``raw`` value.
    return 0, ()


@implementer(IBatchOutcome)
class BatchOutcome(object):

    __slots__ = (
        'index',
        'size',
        'status',
        'raw',
        'rowcount',
        'rows',
        'error',
    )

    def __init__(self, index, size, status, raw=None, error=None):
        self.index = index
        self.size = size
        self.status = status
        self.raw = raw
        self.error = error
        self.rowcount, self.rows = interpret_raw_result(raw)

    @classmethod
    def success(cls, index, size, raw):
        return cls(index, size, SUCCEEDED, raw=raw)

    @classmethod
    def failure(cls, index, size, error):
        return cls(index, size, FAILED, error=error)

    @classmethod
    def skipped(cls, index, size):
        return cls(index, size, NOT_ATTEMPTED)

    @property
    def succeeded(self):
        return self.status == SUCCEEDED

    @property
    def failed(self):
        return self.status == FAILED

    def __repr__(self):
        return "<%s index=%d size=%d status=%s rowcount=%d error=%r>" % (
            type(self).__name__,
            self.index, self.size, self.status, self.rowcount, self.error
        )


@implementer(IOperationResult)
class OperationResult(object):
    """
    The immutable summary of a bulk operation.

    Build it with :class:`ResultAccumulator`.
    """

    def __init__(self, outcomes, first_error=None,
                 aborted=False, cancelled=False, timed_out=False,
                 not_attempted_exact=True):
        self.outcomes = tuple(sorted(outcomes, key=lambda o: o.index))
        self.aborted = aborted
        self.cancelled = cancelled
        self.timed_out = timed_out
        self.not_attempted_exact = not_attempted_exact

        self.batch_count = len(self.outcomes)
        self.succeeded = 0
        self.failed = 0
        self.not_attempted = 0
        self.record_count = 0
        self.records_succeeded = 0
        self.rowcount = 0
        rows = []
        errors = []
        for outcome in self.outcomes:
            self.record_count += outcome.size
            if outcome.status == SUCCEEDED:
                self.succeeded += 1
                self.records_succeeded += outcome.size
                self.rowcount += outcome.rowcount
                rows.extend(outcome.rows)
            elif outcome.status == FAILED:
                self.failed += 1
                errors.append(outcome.error)
            else:
                self.not_attempted += 1
        self.attempted = self.succeeded + self.failed
        self.rows = rows
        self.errors = tuple(errors)
        if first_error is None and errors:
            first_error = errors[0]
        self.first_error = first_error

    @property
    def ok(self):
        return not self.failed and not self.not_attempted

    def raise_first_error(self):
        if self.first_error is not None:
            raise self.first_error

    def __repr__(self):
        return (
            "<%s batches=%d succeeded=%d failed=%d not_attempted=%d "
            "rowcount=%d aborted=%s cancelled=%s timed_out=%s exact=%s>" % (
                type(self).__name__,
                self.batch_count,
                self.succeeded,
                self.failed,
                self.not_attempted,
                self.rowcount,
                self.aborted,
                self.cancelled,
                self.timed_out,
                self.not_attempted_exact,
            )
        )


class ResultAccumulator(object):
    """
    Collects outcomes as batches complete.

    Batches may complete on different threads, so every update happens
    under a lock. Sums are independent of completion order; only
    :attr:`first_error` under the fail-fast policy depends on it.
    """

    def __init__(self, on_error=FAIL_FAST):
        self.on_error = on_error
        self._lock = threading.Lock()
        self._outcomes = []
        self.first_error = None
        self.aborted = False
        self.cancelled = False
        self.timed_out = False
        # False once records were left unread in an input that
        # could not be counted.
        self.not_attempted_exact = True

    @property
    def stopped(self):
        return self.aborted or self.cancelled or self.timed_out

    def add(self, outcome):
        with self._lock:
            self._outcomes.append(outcome)
            if outcome.status == FAILED and self.on_error == FAIL_FAST:
                if self.first_error is None:
                    self.first_error = outcome.error
                self.aborted = True

    def skip(self, index, size):
        self.add(BatchOutcome.skipped(index, size))

    def counts(self):
        """
        Return the number of batches and of records seen so far.
        """
        with self._lock:
            return len(self._outcomes), sum(o.size for o in self._outcomes)

    def result(self):
        with self._lock:
            return OperationResult(
                self._outcomes,
                first_error=self.first_error,
                aborted=self.aborted,
                cancelled=self.cancelled,
                timed_out=self.timed_out,
                not_attempted_exact=self.not_attempted_exact,
            )
