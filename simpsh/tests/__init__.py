"""
simpsh test suite.

Run with: python -m pytest simpsh/tests -v
Or: python -m unittest discover simpsh/tests
"""
