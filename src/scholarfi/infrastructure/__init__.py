"""
Infrastructure layer for Scholar-Fi.
"""
