"""
account_service tests

Covers the account HTTP operations, the user store, password hashing and
token issuance, the event logger, database initialization and health checks.
"""
