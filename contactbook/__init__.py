"""Multi-tenant contact book service."""
