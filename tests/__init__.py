"""
Test suite for the docpress package.
"""
