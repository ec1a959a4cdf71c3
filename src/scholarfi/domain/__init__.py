"""
Domain layer for Scholar-Fi.
"""
