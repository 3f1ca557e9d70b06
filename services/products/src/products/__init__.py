"""Products service: Lambda handler over a DynamoDB products table."""
