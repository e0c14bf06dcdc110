"""
Markers for Avro scalar types that have no distinct Python type.

Python only has one integer and one float type, which map to Avro ``long``
and ``double``. Annotate a field with one of these markers to select the
narrower Avro type instead.
"""

from typing import NewType

Int32 = NewType('Int32', int)
Int64 = NewType('Int64', int)
Float32 = NewType('Float32', float)
Float64 = NewType('Float64', float)
Byte = NewType('Byte', int)
