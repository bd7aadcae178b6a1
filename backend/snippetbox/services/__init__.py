"""
SnippetBox Backend — Services Layer
=====================================

What:  Store-independent logic used by routes and repositories.

Service Inventory:
    - AuthService:   password hashing, token issue/verify (singleton `auth_service`)
    - SnippetFilter: query-string criteria → owner-scoped snippet SELECT
"""
