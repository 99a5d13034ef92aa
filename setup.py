##############################################################################
#
# Copyright (c) 2008 Zope Foundation and Contributors.
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
import os

from setuptools import setup
from setuptools import find_packages


def read_file(*path):
    base_dir = os.path.dirname(__file__)
    file_path = (base_dir, ) + tuple(path)
    with open(os.path.join(*file_path), 'rt', encoding='utf-8') as f:
        result = f.read()
    return result

VERSION = read_file('version.txt').strip()

tests_require = [
    'zope.testrunner',
    'nti.testing',
    'PyHamcrest',
]

setup(
    name="RelBatch",
    version=VERSION,
    author="Zope Foundation and Contributors",
    keywords="SQL RDBMS MySQL PostgreSQL SQLite bulk batch JSON",
    packages=find_packages('src'),
    package_dir={'': 'src'},
    include_package_data=True,
    package_data={
        'relbatch': ['component.xml'],
    },
    license="ZPL 2.1",
    platforms=["any"],
    description=(
        "Bulk relational operations that bind each batch of records "
        "as a single statement parameter."
    ),
    python_requires=">=3.9",
    classifiers=[
        "Intended Audience :: Developers",
        "License :: OSI Approved :: Zope Public License",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3 :: Only",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Programming Language :: Python :: Implementation :: CPython",
        "Programming Language :: Python :: Implementation :: PyPy",
        "Topic :: Database",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "Development Status :: 4 - Beta",
    ],
    long_description=read_file("README.rst"),
    # ZConfig can't see our component.xml inside an archive.
    zip_safe=False,
    install_requires=[
        'perfmetrics >= 3.0.0',
        'zope.interface',
        'ZConfig',
    ],
    extras_require={
        'postgresql': [
            # 2.8 is needed for conn.info
            'psycopg2 >= 2.8.3',
        ],
        'mysql': [
            # JSON_TABLE also needs a MySQL 8 server.
            'mysqlclient >= 2.0.0',
        ],
        'sqlite3': [],
        'test': tests_require,
    },
)
