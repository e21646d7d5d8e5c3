"""
learnpath command-line interface.

Entry point: learnpath.cli.main:run (installed as the `learnpath` command).
"""
