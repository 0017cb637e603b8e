"""
Manifest core schema definitions

This package contains the ``errors`` schemas shared by all failure responses
and the ``origin`` schemas describing replies of the Record API. It also
contains the ``config`` module, but it's not exported by default, since
it's currently only used internally.
"""

from .errors import *
from .origin import *
