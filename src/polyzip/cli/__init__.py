"""
Command-line interface for polyzip.
"""
