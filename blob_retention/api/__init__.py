"""HTTP API for the Blob Retention service."""
