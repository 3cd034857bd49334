"""Test package for Python Notes AI.

Structure:
    - unit/: Individual function and class tests
    - integration/: Gateway and chat workflow tests over real HTTP plumbing

The generation backend is always replaced by a recording fake; no API key is
needed. Leverages pytest with pytest-check for soft assertions.
"""
