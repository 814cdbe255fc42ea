"""
problems package
----------------

The concrete drivers built on top of the solver session:

- `setup`: declares the variable families of each problem.
- `builder`: asserts the rules of each problem into a session.
- `runner`: solves, enumerates or optimizes a built problem and reports the result.
- `rules`: the constraint rules shared by the builders.
"""
