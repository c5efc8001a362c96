"""
Cogs are the low-level building blocks of the library.

They do not depend on the core (the tracking engine) in any way, and can be
used standalone: the field descriptors, the paths, the snapshots, the diffs,
the documents' encoding/decoding, the settings.
"""
