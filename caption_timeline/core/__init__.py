"""Core data model and the pure caption transform.

WHY: The core package holds the stable heart of the system — the IR
dataclasses and the paginate/schedule transform. Loading, probing, and
exporting all live outside it and depend on it, never the reverse.

HOW: ir.py defines the data structures, options.py validates and resolves
configuration, paginator.py groups words into pages, scheduler.py maps
pages onto frames, pipeline.py chains the two behind a memo table.

RULES:
- Nothing in core performs I/O
- IR dataclasses are frozen — recompute, never mutate
"""
