"""buildherald CLI: Typer-based inspection commands.

Lets an operator preview what the notifier would send: the filtered host
information for a host descriptor, the commit range picked up from git,
and the effective configuration.  All output uses Rich.
"""
