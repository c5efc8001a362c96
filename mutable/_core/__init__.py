"""
The core of the library: the tracking engine and the logging engines.

The core depends on the cogs, but the cogs never depend on the core.
"""
