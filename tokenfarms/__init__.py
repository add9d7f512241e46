"""
Package marker for the token farms query API.
It groups the API layer and shared helpers under a stable import path.
Most functionality lives in the sibling modules; this file intentionally stays lightweight.
"""
