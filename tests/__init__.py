"""Pytest requires __init__.py file in tests folder and subfolders.

With this file present, the folder containing tests/ is used as root folder,
so that `import zsgamesolver` resolves to the package next to it and helpers
can be imported as `tests.<module>`.
"""
