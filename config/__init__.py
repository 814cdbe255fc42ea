"""
config
------

Project paths and the JSON constants file read by `utils.constants`.
"""
