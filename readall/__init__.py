"""Readall: RSVP segmentation and pacing core."""

__version__ = "0.1.0"
