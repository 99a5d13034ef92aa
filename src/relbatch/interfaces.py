# -*- coding: utf-8 -*-
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
Interfaces and exceptions for RelBatch components.

The interfaces serve as documentation and for validation of the
components; callers are free to pass plain functions wherever an
encoder or executor is expected.
"""

from zope.interface import Attribute
from zope.interface import Interface

# pylint:disable=inherit-non-class,no-method-argument,no-self-argument

__all__ = [
    'IRecordEncoder',
    'IPayloadExecutor',
    'IBatchOutcome',
    'IOperationResult',
    'IBatchDispatcher',
    'IStatementBuilder',

    'BulkOperationError',
    'ConfigurationError',
    'BatchError',
    'EncodingError',
    'ExecutionError',
]


class IRecordEncoder(Interface):
    """
    Turns one batch of records into a single payload that can be
    bound as one parameter of a statement.
    """

    def __call__(records):
        """
        Return the payload representing the list *records*.

        Raise any exception if the records cannot be serialized; the
        dispatcher reports it as an :class:`EncodingError`.
        """


class IPayloadExecutor(Interface):
    """
    Sends one payload to the database.

    This is usually a thin wrapper around a single parameterized
    statement where the whole batch is passed as one bound value.
    """

    def __call__(payload):
        """
        Execute the statement for *payload* and return a raw result.

        The raw result may be an :class:`relbatch.result.ExecuteResult`,
        an integer count of affected rows, a list of returned rows, or
        ``None``.
        """


class IBatchOutcome(Interface):
    """
    What happened to one batch.
    """

    index = Attribute("The zero-based position of the batch in the partition.")
    size = Attribute("The number of records in the batch.")
    status = Attribute("One of 'succeeded', 'failed' or 'not_attempted'.")
    raw = Attribute("The raw value returned by the executor, if it succeeded.")
    rowcount = Attribute("The number of rows affected by the batch.")
    rows = Attribute("A tuple of the rows returned for the batch.")
    error = Attribute("The BatchError for a failed batch, or None.")

    succeeded = Attribute("Boolean: did the batch succeed?")
    failed = Attribute("Boolean: did the batch fail?")


class IOperationResult(Interface):
    """
    The aggregated result of one bulk operation.

    Every batch of the partition is accounted for exactly once as
    succeeded, failed, or not attempted.
    """

    outcomes = Attribute("A tuple of IBatchOutcome, ordered by batch index.")

    batch_count = Attribute("The total number of batches in the partition.")
    attempted = Attribute("How many batches were encoded (and possibly executed).")
    succeeded = Attribute("How many batches succeeded.")
    failed = Attribute("How many batches failed.")
    not_attempted = Attribute("How many batches were never started.")

    record_count = Attribute("The total number of input records.")
    records_succeeded = Attribute("How many records were in succeeded batches.")

    rowcount = Attribute("The sum of rows affected by successful batches.")
    rows = Attribute("All returned rows, in partition order.")

    errors = Attribute("A tuple of BatchError, ordered by batch index.")
    first_error = Attribute(
        "The error that stopped a fail-fast operation, otherwise the "
        "lowest-indexed error, or None.")

    aborted = Attribute("Boolean: did a failure stop a fail-fast operation?")
    cancelled = Attribute("Boolean: did the cancel signal stop the operation?")
    timed_out = Attribute("Boolean: did the aggregate timeout stop the operation?")
    not_attempted_exact = Attribute(
        "Boolean: False if the operation stopped early on an input without "
        "a length, such as a generator. The rest of that input is never "
        "read, so not_attempted and record_count only cover the records "
        "that were seen.")
    ok = Attribute("Boolean: did every batch succeed?")

    def raise_first_error():
        """
        Raise :attr:`first_error` if there is one, otherwise do nothing.
        """


class IBatchDispatcher(Interface):
    """
    Partitions records, encodes each batch and dispatches it.
    """

    options = Attribute("The validated :class:`relbatch.options.Options`.")

    def run(records, cancel=None, batch_done_callback=None):
        """
        Run the bulk operation over the iterable *records*.

        :keyword cancel: An object with an ``is_set()`` method, such
            as a :class:`threading.Event`. Once it is set, no new batch
            is started.
        :keyword batch_done_callback: Called with the IBatchOutcome of
            each batch that succeeded or failed.
        :return: An :class:`IOperationResult`.
        """


class IStatementBuilder(Interface):
    """
    Produces SQL statements that take a whole batch of records as
    exactly one bound parameter.

    *columns* arguments are sequences of ``(name, sql_type)`` pairs.
    Names are interpolated as given and must be trusted identifiers.
    """

    placeholder = Attribute("The driver's parameter placeholder, e.g. '%s' or '?'.")

    def insert(table, columns, suffix=''):
        """
        ``INSERT INTO table (...)`` selecting every record of the payload.
        """

    def update(table, columns, key_columns):
        """
        Set the non-key *columns* of the rows matched by *key_columns*.
        """

    def delete(table, key_columns):
        """
        Delete the rows matched by *key_columns*.
        """

    def select(select_columns, table, key_columns):
        """
        Return the *select_columns* of the rows matched by *key_columns*.
        """


###
# Exceptions
###

class BulkOperationError(Exception):
    """Base class for all errors raised by RelBatch."""


class ConfigurationError(BulkOperationError, ValueError):
    """
    The options for a bulk operation are invalid.

    Raised before any batch is dispatched.
    """


class BatchError(BulkOperationError):
    """
    A single batch failed.

    The underlying exception is available as :attr:`cause` and
    as ``__cause__``.
    """

    #: The zero-based index of the failed batch.
    chunk_index = None
    #: The exception that made the batch fail.
    cause = None

    def __init__(self, chunk_index=None, cause=None, message=None):
        if message is None:
            message = '%s' % (cause,) if cause is not None else ''
        super(BatchError, self).__init__(message)
        self.message = message
        self.chunk_index = chunk_index
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def __str__(self):
        return "Batch %s: %s" % (self.chunk_index, self.message)

    def __repr__(self):
        return "<%s chunk_index=%r cause=%r>" % (
            type(self).__name__,
            self.chunk_index,
            self.cause,
        )


class EncodingError(BatchError):
    """
    The payload for a batch could not be constructed, for example
    because a record contains a cyclic structure or a value of an
    unsupported type.
    """


class ExecutionError(BatchError):
    """
    The executor failed for a batch, for example because the
    database call raised or timed out.
    """
