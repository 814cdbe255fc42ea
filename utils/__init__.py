"""
utils package
-------------

Shared helpers for the solver drivers.

Includes configuration constants, the named logger, problem catalog loading,
table validation and the index helpers derived from static problem tables.
"""
