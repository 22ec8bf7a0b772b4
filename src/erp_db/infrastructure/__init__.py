"""Infrastructure Layer for the ERP database utilities.

This module provides the concrete pieces route handlers compose when they
talk to the database:
- security: identifier guard for table and column names
- database: pagination, SQL fragment builders, error normalizer, PostgreSQL adapter
- resilience: retry with exponential backoff and chunked batch execution
- repositories: sequential unit of work, native transaction scope, saga coordinator
- monitoring: structured logging with correlation ids
"""
