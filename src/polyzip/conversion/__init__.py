"""
Name conversion and the list / convert / convert-in-place operations.
"""
