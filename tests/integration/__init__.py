"""
Integration Tests Package

End-to-end consolidation through a default-built Consolidator.

TEST AXIOMS:
=============
1. A true exchange of two values consolidates into a swap
2. Anything else yields no consolidation, never an exception
"""
