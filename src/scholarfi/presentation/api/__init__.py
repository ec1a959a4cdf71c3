"""REST API for Scholar-Fi."""
