"""
HTTP API of the booking core.
"""
