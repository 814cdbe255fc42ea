"""
problems.rules
--------------

Exposes all constraint rules by importing from:

- `boolean`: CNF clauses of toy satisfiability checks.
- `positional`: Permutation encodings (N-queens, Hamiltonian cycle).
- `capacity`: Role domains, sibling exclusion and zone capacity for CPU partitioning.

Every rule has the signature `rule(session, state)` and only asserts
constraints; none of them keeps state of its own.
"""
from .boolean import *
from .positional import *
from .capacity import *
