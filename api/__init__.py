"""
HTTP surface: routes and request-scoped dependencies.
"""
