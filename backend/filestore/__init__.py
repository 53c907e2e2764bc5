"""File Storage Server.

An HTTP file store: clients save base64-encoded files by name, extract them
later, or delete them.  Files live flat under a single storage root.
"""
__version__ = "0.1.0"
