"""Verification backends for rewrites.

- z3: prove that a rewrite preserves the value of an expression.
"""
