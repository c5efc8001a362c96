"""
All the structures to describe the tracked objects and their changes.

Grouped by the purpose: the field descriptors of the classes, the paths
of the nested fields, the snapshots (checkpoints) of the objects, the diffs,
the equality of the values, the encoding & decoding of the JSON documents.

All the functions are purely data-manipulative and computational.
No external calls or any i/o activities are done here.
"""
