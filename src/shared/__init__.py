"""
Shared Layer - Cross-Cutting Concerns
Configuration-aware logging, error contract, security, database handle and the
row-to-nested aggregation helpers used by every bounded context.
"""
