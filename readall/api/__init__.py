"""HTTP API for Readall."""
