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
"""ZConfig directive implementations for configuring bulk operations.

A schema that imports this package can contain sections like::

    <relbatch>
        batch-size 500
        concurrency 4
        on-error collect
    </relbatch>
"""

from relbatch.batch import BatchDispatcher
from relbatch.options import Options

logger = __import__('logging').getLogger(__name__)


class BaseConfig(object):

    def __init__(self, config):
        self.config = config
        self.name = config.getSectionName()


class RelBatchFactory(BaseConfig):
    """Produce options and dispatchers from a ``<relbatch>`` section."""

    def create_options(self, execute=None, encode=None):
        """
        Return an :class:`.Options` holding the configured settings.

        The callables can't be configured in text, so they are
        supplied here.
        """
        overrides = {}
        if execute is not None:
            overrides['execute'] = execute
        if encode is not None:
            overrides['encode'] = encode
        options = Options.copy_valid_options(self.config, **overrides)
        logger.debug("Configured %s from section %r", options, self.name)
        return options

    def create(self, execute, encode=None):
        """
        Return a :class:`.BatchDispatcher` for *execute*.

        :raises ConfigurationError: If the configured values are invalid.
        """
        return BatchDispatcher(self.create_options(execute, encode))
