"""
SnippetBox Backend — API Routes Package
=========================================

What:  HTTP route handlers, mounted under API_PREFIX (default /api).

Route Inventory:
    - auth.py:        POST /auth/register, POST /auth/login, GET /auth/me
    - languages.py:   GET/POST /languages, DELETE /languages/{id}       (public)
    - categories.py:  GET/POST /categories, PUT/DELETE /categories/{id}
    - tags.py:        GET/POST /tags, DELETE /tags/{id}
    - snippets.py:    GET/POST /snippets, GET/PUT/DELETE /snippets/{id},
                      POST /snippets/{id}/duplicate
    - health.py:      GET /health (also mounted at the root)

Design Principle:
    Routes stay thin: parse the request, call a repository, pick the status
    code. Ownership, validation and transactions live in the repositories.
"""
