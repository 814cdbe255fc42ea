"""
exceptions
----------

Error taxonomy for the solver orchestration layer, grouped by category:

- construction: bad names, domains or problem tables supplied by the caller.
- session misuse: unbalanced checkpoint stack, reading a model that does not exist.
- oracle contract: the solver returned no value, or a value outside a declared domain.
"""
from .custom_errors import *
