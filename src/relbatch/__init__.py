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
RelBatch: bulk relational operations under a bind-parameter limit.

Records are partitioned into batches, each batch is encoded into one
value (by default a JSON array), and each value is bound as the single
parameter of one statement::

    from relbatch import run
    from relbatch.adapters.cursor import CursorExecutor
    from relbatch.adapters.postgresql import PostgreSQLStatementBuilder

    stmt = PostgreSQLStatementBuilder().insert(
        'item', [('id', 'bigint'), ('name', 'text')])
    result = run(records, execute=CursorExecutor(stmt, cursor=cursor),
                 batch_size=1000)
"""

from relbatch.batch import BatchDispatcher
from relbatch.batch import run
from relbatch.encoding import JsonArrayEncoder
from relbatch.encoding import ValueListEncoder
from relbatch.encoding import encode_json_array
from relbatch.interfaces import BatchError
from relbatch.interfaces import BulkOperationError
from relbatch.interfaces import ConfigurationError
from relbatch.interfaces import EncodingError
from relbatch.interfaces import ExecutionError
from relbatch.options import COLLECT
from relbatch.options import FAIL_FAST
from relbatch.options import Options
from relbatch.result import BatchOutcome
from relbatch.result import ExecuteResult
from relbatch.result import OperationResult

__all__ = [
    'run',
    'BatchDispatcher',
    'Options',
    'FAIL_FAST',
    'COLLECT',

    'JsonArrayEncoder',
    'ValueListEncoder',
    'encode_json_array',

    'BatchOutcome',
    'ExecuteResult',
    'OperationResult',

    'BulkOperationError',
    'ConfigurationError',
    'BatchError',
    'EncodingError',
    'ExecutionError',
]
