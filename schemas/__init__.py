"""
schemas package
---------------

Pydantic models describing the input of every problem family.
"""
