"""Domain-level policies and business rules.

This package contains logic that defines *what* the premium rules are,
independent from *where* they are applied (services, repositories, etc.).
"""
