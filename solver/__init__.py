"""
solver
------

Orchestration around the external decision procedure:

- `oracle`: CP-SAT adapter that compiles constraint expressions and runs a check.
- `session`: Solver session with the incremental assertion (checkpoint) stack.
- `extractor`: Reading typed assignments out of satisfying models.
- `enumerator`: Blocking-clause enumeration of all distinct solutions.
- `optimizer`: Iterative min-max tightening of per-zone loads.
"""
