"""Dossier: document records with photo/audio attachments and change history.

Records hold schemaless field data next to binary attachments. Saving a
record validates new attachments, normalizes photo and audio storage,
diffs the tracked fields against the persisted state and prepends an
attributed history entry.
"""

__version__ = "0.1.0"
