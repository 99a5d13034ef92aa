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

import itertools
import os
import sys

import logging
from logging import DEBUG
from logging import INFO
from logging import WARN
from logging import ERROR
from functools import wraps
from time import perf_counter

from ZConfig.datatypes import asBoolean
from ZConfig.datatypes import integer
from ZConfig.datatypes import RangeCheckedConversion

from perfmetrics import metricmethod
from perfmetrics import Metric

_logger = logging.getLogger('relbatch')
perf_logger = _logger.getChild('timing')

# Trace is beneath (less important than) DEBUG.
# It is "extremely verbose"
TRACE = 5
logging.addLevelName(TRACE, 'TRACE')

__all__ = [
    'TRACE',
    'byte_display',
    'iter_chunks',

    'get_positive_integer_from_environ',
    'get_non_negative_float_from_environ',
    'get_boolean_from_environ',

    'log_timed',
    'metricmethod',
    'metricmethod_sampled',
    'parse_boolean',
    'positive_integer',
    'non_negative_float',
]

positive_integer = RangeCheckedConversion(integer, min=1)
non_negative_float = RangeCheckedConversion(float, min=0)

IN_TESTRUNNER = (
    # zope-testrunner --test-path ...
    'zope-testrunner' in sys.argv[0]
    # python -m zope.testrunner --test-path ...
    or os.path.join('zope', 'testrunner') in sys.argv[0]
)

def _setting_from_environ(converter, environ_name, default, logger):
    result = default
    env_val = os.environ.get(environ_name, default)
    if env_val is not default:
        try:
            result = converter(env_val)
        except (ValueError, TypeError):
            logger.exception("Failed to parse environment value %r for key %r",
                             env_val, environ_name)
            result = default

    logger.debug('Using value %s from environ %r=%r (default=%r)',
                 result, environ_name, env_val, default)
    return result


def get_positive_integer_from_environ(environ_name, default, logger=_logger):
    return _setting_from_environ(positive_integer, environ_name, default, logger)

def get_non_negative_float_from_environ(environ_name, default, logger=_logger):
    return _setting_from_environ(non_negative_float, environ_name, default, logger)

def parse_boolean(val):
    if val == '0':
        return False
    if val == '1':
        return True
    return asBoolean(val)

def get_boolean_from_environ(environ_name, default, logger=_logger):
    return _setting_from_environ(parse_boolean, environ_name, default, logger)


def _get_log_time_level(level_int, default):
    level_name = logging.getLevelName(level_int)
    val = _setting_from_environ(
        non_negative_float,
        'RELBATCH_PERF_LOG_%s_MIN' % level_name,
        default,
        logger=perf_logger
    )
    return (level_int, float(val))

# A list of tuples (level_int, min_duration), ordered by increasing
# min_duration. Modify this list in place to apply to all functions;
# make a copy and place it in ``func.__wrapped__.log_levels`` to change
# it for an individual function.
_LOG_TIMED_DEFAULT_DURATIONS = [
    _get_log_time_level(TRACE, 0.31),
    _get_log_time_level(DEBUG, 1.24),
    _get_log_time_level(INFO, 3.03),
    _get_log_time_level(WARN, 9.24),
    _get_log_time_level(ERROR, 20.10)
]

_LOG_TIMED_DEFAULT_DURATIONS.sort(key=lambda x: x[1])

# timed events above this threshold will include the arguments.
_LOG_TIMED_DEFAULT_DETAILS_THRESHOLD = logging.getLevelName(
    _setting_from_environ(str, 'RELBATCH_PERF_LOG_DETAILS_LEVEL', 'WARN', logger=perf_logger)
)

# If this is false when a module is imported, timer decorations
# are omitted.
_LOG_TIMED_COMPILETIME_ENABLE = get_boolean_from_environ(
    'RELBATCH_PERF_LOG_ENABLE',
    'on',
    logger=perf_logger,
)

def do_log_duration_info(basic_msg, func,
                         args, kwargs,
                         actual_duration,
                         log=perf_logger):
    log_level = 0
    log_msg = basic_msg
    log_args = (func.__name__, actual_duration)
    for level, duration in func.log_levels:
        if actual_duration < duration:
            break
        log_level = level

    if not log_level or not log.isEnabledFor(log_level):
        return

    if log_level >= func.log_details_threshold:
        # This will capture 'self' as the first argument,
        # so put useful things into that repr.
        try:
            load = os.getloadavg()
        except (OSError, AttributeError):
            load = "<unknown load>"

        if getattr(func, 'log_args_only_self', None):
            args = args[:1]
            kwargs = {}
        log_msg += " (load=%s) (args=%r kwargs=%r)"
        log_args += (load, args, kwargs)

    log.log(log_level, log_msg, *log_args)

def log_timed(func):
    # Stored on each individual function so they can be
    # tweaked later: Class.func.__wrapped__.log_levels = X
    func.log_levels = _LOG_TIMED_DEFAULT_DURATIONS
    func.log_details_threshold = _LOG_TIMED_DEFAULT_DETAILS_THRESHOLD
    if not _LOG_TIMED_COMPILETIME_ENABLE:
        return func

    counter = perf_counter
    log = do_log_duration_info
    func_logger = logging.getLogger(func.__module__).getChild('timing')

    @wraps(func)
    def f(*args, **kwargs):
        begin = counter()
        try:
            result = func(*args, **kwargs)
        finally:
            duration = counter() - begin
            log("Function %s took %.3fs.", func, args, kwargs, duration,
                log=func_logger)

        return result

    return f


def log_timed_only_self(func):
    func.log_args_only_self = 1
    return log_timed(func)


METRIC_SAMPLE_RATE = get_non_negative_float_from_environ('RELBATCH_PERF_STATSD_SAMPLE_RATE', 0.1,
                                                         logger=perf_logger)

metricmethod_sampled = Metric(method=True, rate=METRIC_SAMPLE_RATE)

if IN_TESTRUNNER and os.environ.get('RELBATCH_TEST_DISABLE_METRICS'):
    # Under the testrunner the metric wrappers make backtraces ugly
    # and stepping in the debugger annoying.
    metricmethod = metricmethod_sampled = lambda f: f


def byte_display(size):
    """
    Returns a string with the correct unit (KB, MB), given the size in bytes.
    """
    if size == 0:
        return '0 KB'
    if size <= 1024:
        return '%s bytes' % size
    if size > 1048576:
        return '%0.02f MB' % (size / 1048576.0)
    return '%0.02f KB' % (size / 1024.0)


def iter_chunks(iterable, size):
    """
    Yield consecutive lists of at most *size* items from *iterable*.

    The iterable may be a generator; no more than *size* items are
    ever materialized at once. Order is preserved, both within each
    chunk and from chunk to chunk.
    """
    items = iter(iterable)
    rest_of_chunk = size - 1
    for head in items:
        chunk = [head]
        chunk.extend(itertools.islice(items, rest_of_chunk))
        yield chunk

