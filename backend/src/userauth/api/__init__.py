"""API Gateway handlers for user authentication."""
