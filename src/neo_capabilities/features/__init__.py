"""Features for neo-capabilities.

Feature-First layout:
- users/: User entity, user store and role membership checks
- resource_types/: Content types, taxonomies and slot resolution
- policies/: Policy builder, evaluation registry and chaining
"""
