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

from relbatch._util import get_positive_integer_from_environ
from relbatch._util import positive_integer
from relbatch._util import non_negative_float
from relbatch.interfaces import ConfigurationError

#: Stop starting new batches after the first failure.
FAIL_FAST = 'fail_fast'
#: Dispatch every batch and accumulate all failures.
COLLECT = 'collect'

ERROR_POLICIES = (FAIL_FAST, COLLECT)

#: The default maximum number of records per batch. PostgreSQL
#: allows 65535 bind parameters per statement, but because an entire
#: batch is bound as a single value this only bounds the size of the
#: payload.
DEFAULT_BATCH_SIZE = get_positive_integer_from_environ(
    'RELBATCH_BATCH_SIZE',
    1000
)

#: The default number of batches in flight at once.
DEFAULT_CONCURRENCY = get_positive_integer_from_environ(
    'RELBATCH_CONCURRENCY',
    1
)


class Options(object):
    """Options for configuring a bulk operation.

    These parameters can be provided as keyword options to
    :func:`relbatch.run` or :class:`.BatchDispatcher`. For example::

        options = Options(batch_size=500, execute=executor, on_error='collect')

    Unknown option names raise :class:`.ConfigurationError`. Values are
    checked by :meth:`validate`, which the dispatcher calls before it
    does anything else.
    """

    #: The maximum number of records per batch.
    batch_size = DEFAULT_BATCH_SIZE
    #: The maximum number of batches executing at once.
    #: 1 means strictly sequential.
    concurrency = DEFAULT_CONCURRENCY
    #: ``'fail_fast'`` or ``'collect'``
    on_error = FAIL_FAST
    #: Approximate maximum number of seconds for the whole operation.
    #: Checked before each batch is started. None or 0 disables it.
    timeout = None
    #: Callable turning a list of records into one payload.
    #: None means :data:`relbatch.encoding.encode_json_array`.
    encode = None
    #: Callable executing one payload. Required.
    execute = None

    def __init__(self, **kwoptions):
        for key, value in kwoptions.items():
            if key not in self.valid_option_names():
                raise ConfigurationError("Unknown parameter: %s (Known: %s)" % (
                    key,
                    self.valid_option_names()
                ))
            setattr(self, key, value)

    def __repr__(self):
        return "<%s %s>" % (
            type(self).__name__,
            ' '.join('%s=%r' % (k, getattr(self, k)) for k in self.valid_option_names())
        )

    @classmethod
    def copy_valid_options(cls, other_options, **overrides):
        """
        Produce a new options featuring only the valid settings from
        *other_options*, which may be another Options, a ZConfig
        section, or any object with matching attributes. Keyword
        arguments take precedence.
        """
        option_dict = {}
        for key in cls.valid_option_names():
            value = getattr(other_options, key, None)
            if value is not None:
                option_dict[key] = value
        option_dict.update(overrides)
        return cls(**option_dict)

    @classmethod
    def valid_option_names(cls):
        return sorted(
            x
            for x in vars(Options)
            if not callable(getattr(Options, x)) and not x.startswith('_')
        )

    def validate(self):
        """
        Check and normalize every option in place.

        :return: This object.
        :raises ConfigurationError: If any option is invalid.
        """
        self.batch_size = self._positive_integer('batch_size')
        self.concurrency = self._positive_integer('concurrency')

        policy = self.on_error
        if isinstance(policy, str):
            policy = policy.strip().lower().replace('-', '_')
        if policy not in ERROR_POLICIES:
            raise ConfigurationError(
                "on_error must be one of %s, not %r" % (ERROR_POLICIES, self.on_error))
        self.on_error = policy

        if self.timeout is not None:
            try:
                self.timeout = non_negative_float(self.timeout) or None
            except (TypeError, ValueError) as e:
                raise ConfigurationError(
                    "timeout must be a non-negative number of seconds, not %r" % (
                        self.timeout,)) from e

        if self.execute is None or not callable(self.execute):
            raise ConfigurationError("execute must be callable, not %r" % (self.execute,))
        if self.encode is not None and not callable(self.encode):
            raise ConfigurationError("encode must be callable, not %r" % (self.encode,))
        return self

    def _positive_integer(self, name):
        value = getattr(self, name)
        if isinstance(value, bool):
            raise ConfigurationError("%s must be a positive integer, not %r" % (name, value))
        try:
            return positive_integer(value)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                "%s must be a positive integer, not %r" % (name, value)) from e
