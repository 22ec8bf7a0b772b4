"""
Application Layer - Contracts, Configuration and Services

This layer contains:
- Interfaces: the database adapter contract and the exception hierarchy
- Config: dataclass settings loaded from environment or YAML
- Services: orchestration of the query helpers for list endpoints
"""
