"""User authentication backend for AWS Lambda."""
