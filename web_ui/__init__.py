"""
BookmarkHub v1 - Web API

FastAPI application exposing imports, folders, tags and the timeline.
"""

__version__ = "1.0.0"
