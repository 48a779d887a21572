"""
Flight result pipeline.

Turns heterogeneous provider offers into a filtered, sorted, paginated
and statistically annotated result set.
"""

__version__ = "0.1.0"
