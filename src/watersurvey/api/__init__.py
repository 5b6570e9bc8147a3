"""
HTTP API exposing survey sessions to a rendering surface.
"""
