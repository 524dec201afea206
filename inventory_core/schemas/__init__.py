"""
Inventory schema definitions

Any schema has a base name and any of the following extended names:
 * ``Creation`` to create a new instance of that schema
 * ``Update`` to replace an existing instance of that schema
For example, there are three classes to represent categories:
``Category``, ``CategoryCreation`` and ``CategoryUpdate``

The base schemas describe the current (latest) API version. The
``legacy`` module holds the flat projections used by the older
versions 1 and 2, where articles carry their stock directly.

This package also contains the ``config`` module, but it's not
exported by default, since it's currently only used internally.
"""

from .bases import *
from .errors import *
from .extra import *
from .legacy import *
