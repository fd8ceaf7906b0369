"""Blob Retention service.

Scheduled retention and garbage collection for a shared blob storage
namespace holding chat transcripts, audit events, generated documents and
usage sessions.
"""

__version__ = "1.0.0"
