"""
core
----

Core building blocks shared by every problem family:

- Domains, Variable & constraint expressions:
  Oracle-neutral, immutable constraint trees (`core.expressions`).

- VariableRegistry:
  Allocate decision variables keyed by problem coordinates, with generated names.

- ConstraintManager:
  Register and apply constraint rules in a controlled sequence.

- QueensState, CycleState, PartitionState, BooleanState:
  Encapsulate the variables and parameters of each problem family.
"""
