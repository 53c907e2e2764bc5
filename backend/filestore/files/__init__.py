"""File storage module.

Handles the three storage operations exposed over HTTP:

- Save: decode a base64 payload and durably write it under a name
- Delete: remove one stored file
- Extract: read a stored file back as base64

Files are stored flat in the configured storage root; names may not contain
path separators or escape the root.  Operations on the same name are
serialised by a per-name lock.
"""
