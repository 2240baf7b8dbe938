"""
HTTP control API.
"""
