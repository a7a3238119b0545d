"""
MindNotes Backend - spatial notes with Drive and GitHub mirroring

REST API for a mind-map style note canvas: notes, the links between them,
and one-way mirroring of notes to Google Drive and GitHub as markdown.
"""

__version__ = "1.0.0"
