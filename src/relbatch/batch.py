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
"""Batch encoding and dispatch.
"""
import logging
from collections.abc import Sized
from concurrent.futures import FIRST_COMPLETED
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import wait
from time import perf_counter

from zope.interface import implementer

from relbatch._util import TRACE
from relbatch._util import byte_display
from relbatch._util import iter_chunks
from relbatch._util import log_timed_only_self
from relbatch._util import metricmethod
from relbatch._util import metricmethod_sampled
from relbatch.encoding import encode_json_array
from relbatch.interfaces import EncodingError
from relbatch.interfaces import ExecutionError
from relbatch.interfaces import IBatchDispatcher
from relbatch.options import Options
from relbatch.result import BatchOutcome
from relbatch.result import ResultAccumulator

logger = logging.getLogger(__name__)


@implementer(IBatchDispatcher)
class BatchDispatcher(object):
    """
    Partitions records into batches, encodes each batch into a single
    payload and hands the payload to the executor.

    Batches are formed from consecutive records, at most
    ``batch_size`` at a time, so the partition is always the same for
    the same input no matter how the batches are later executed.
    Records may come from a generator, even an endless one; only the
    batches currently being encoded or executed are held in memory, and
    once the operation stops no further records are read.

    With ``concurrency`` of 1 (the default) batches run one after the
    other in the calling thread. Otherwise up to ``concurrency``
    executor calls run at once in a thread pool; encoding still happens
    in the calling thread.
    """

    perf_counter = perf_counter

    def __init__(self, options=None, **kwoptions):
        if options is None:
            options = Options(**kwoptions)
        else:
            options = Options.copy_valid_options(options, **kwoptions)
        self.options = options.validate()
        self.encode = options.encode or encode_json_array
        self.execute = options.execute

    def __repr__(self):
        return "<%s at %x batch_size=%d concurrency=%d on_error=%s>" % (
            type(self).__name__,
            id(self),
            self.options.batch_size,
            self.options.concurrency,
            self.options.on_error,
        )

    @metricmethod_sampled
    @log_timed_only_self
    def run(self, records, cancel=None, batch_done_callback=None):
        """
        Run the bulk operation and return an :class:`.OperationResult`.

        Empty *records* return at once without calling the executor.
        Failures of individual batches never propagate out of this
        method; they are recorded in the result according to the
        ``on_error`` policy.
        """
        options = self.options
        accumulator = ResultAccumulator(options.on_error)
        if records is None:
            records = ()
        chunks = enumerate(iter_chunks(records, options.batch_size))
        deadline = None
        if options.timeout:
            deadline = self.perf_counter() + options.timeout

        if options.concurrency == 1:
            stopped_early = self._run_sequential(chunks, accumulator, cancel, deadline,
                                                 batch_done_callback)
        else:
            stopped_early = self._run_concurrent(chunks, accumulator, cancel, deadline,
                                                 batch_done_callback)

        if stopped_early:
            self._skip_rest(records, accumulator)

        result = accumulator.result()
        if accumulator.stopped:
            logger.info(
                "Bulk operation stopped early (aborted=%s cancelled=%s timed_out=%s): %r",
                result.aborted, result.cancelled, result.timed_out, result
            )
        else:
            logger.debug("Bulk operation finished: %r", result)
        return result

    def _skip_rest(self, records, accumulator):
        """
        Account for the batches that were never taken from *records*.

        The input is not consumed any further; it may be endless. Only
        a sized input can be counted, and then the remaining batches
        are reported as not attempted. Otherwise the result's counts
        only cover the records that were seen.
        """
        if not isinstance(records, Sized):
            accumulator.not_attempted_exact = False
            return

        index, seen = accumulator.counts()
        remaining = len(records) - seen
        batch_size = self.options.batch_size
        while remaining > 0:
            size = min(batch_size, remaining)
            accumulator.skip(index, size)
            index += 1
            remaining -= size

    def _should_stop(self, accumulator, cancel, deadline):
        if accumulator.stopped:
            return True
        if cancel is not None and cancel.is_set():
            logger.debug("Bulk operation cancelled")
            accumulator.cancelled = True
            return True
        if deadline is not None and self.perf_counter() >= deadline:
            logger.warning("Bulk operation exceeded its timeout of %ss",
                           self.options.timeout)
            accumulator.timed_out = True
            return True
        return False

    def _run_sequential(self, chunks, accumulator, cancel, deadline, callback):
        """
        Return whether the input may still have unread records.
        """
        for index, chunk in chunks:
            if self._should_stop(accumulator, cancel, deadline):
                accumulator.skip(index, len(chunk))
                return True
            payload, outcome = self._encode(index, chunk)
            if outcome is None:
                outcome = self._execute(index, len(chunk), payload)
            self._complete(outcome, accumulator, callback)
        return False

    def _run_concurrent(self, chunks, accumulator, cancel, deadline, callback):
        concurrency = self.options.concurrency
        stopped_early = False
        in_flight = set()
        with ThreadPoolExecutor(max_workers=concurrency,
                                thread_name_prefix='relbatch') as pool:
            for index, chunk in chunks:
                # A batch that already finished may have failed; find
                # out before starting another. Block only while the
                # pool is full.
                done, in_flight = wait(in_flight, timeout=0)
                self._complete_futures(done, accumulator, callback)
                while len(in_flight) >= concurrency:
                    done, in_flight = wait(in_flight, return_when=FIRST_COMPLETED)
                    self._complete_futures(done, accumulator, callback)

                if self._should_stop(accumulator, cancel, deadline):
                    accumulator.skip(index, len(chunk))
                    stopped_early = True
                    break

                payload, outcome = self._encode(index, chunk)
                if outcome is not None:
                    self._complete(outcome, accumulator, callback)
                    continue
                in_flight.add(pool.submit(self._execute, index, len(chunk), payload))

            # In-flight calls can't be interrupted; let them finish so
            # they are reported.
            done, _ = wait(in_flight)
            self._complete_futures(done, accumulator, callback)
        return stopped_early

    def _complete_futures(self, futures, accumulator, callback):
        # _execute handles everything but BaseException; let those
        # propagate.
        for outcome in sorted((f.result() for f in futures), key=lambda o: o.index):
            self._complete(outcome, accumulator, callback)

    def _complete(self, outcome, accumulator, callback):
        accumulator.add(outcome)
        if callback is not None:
            callback(outcome)

    @metricmethod
    def _encode(self, index, chunk):
        """
        Return ``(payload, None)``, or ``(None, outcome)`` if *chunk*
        could not be encoded.
        """
        try:
            payload = self.encode(chunk)
        except Exception as ex: # pylint:disable=broad-except
            error = EncodingError(index, ex)
            logger.warning("Failed to encode batch %d of %d records: %s",
                           index, len(chunk), ex)
            return None, BatchOutcome.failure(index, len(chunk), error)

        if logger.isEnabledFor(TRACE):
            logger.log(TRACE, "Encoded batch %d of %d records into %s",
                       index, len(chunk),
                       byte_display(len(payload))
                       if isinstance(payload, (str, bytes))
                       else type(payload).__name__)
        return payload, None

    def _execute(self, index, size, payload):
        try:
            raw = self.execute(payload)
        except ExecutionError as ex:
            if ex.chunk_index is None:
                ex.chunk_index = index
            error = ex
        except Exception as ex: # pylint:disable=broad-except
            error = ExecutionError(index, ex)
        else:
            logger.log(TRACE, "Executed batch %d of %d records", index, size)
            return BatchOutcome.success(index, size, raw)

        logger.warning("Failed to execute batch %d of %d records: %s",
                       index, size, error.cause if error.cause is not None else error,
                       exc_info=error)
        return BatchOutcome.failure(index, size, error)


def run(records, config=None, cancel=None, batch_done_callback=None, **options):
    """
    Partition *records*, encode and execute each batch, and return an
    :class:`.OperationResult`.

    *config* may be an :class:`.Options`, a mapping of option names, or
    None; keyword *options* override it. At least ``execute`` must be
    given.

    :raises ConfigurationError: Before anything is executed, if an
        option is invalid.
    """
    if config is not None and not isinstance(config, Options):
        options = dict(config, **options)
        config = None
    dispatcher = BatchDispatcher(config, **options)
    return dispatcher.run(records, cancel=cancel, batch_done_callback=batch_done_callback)
