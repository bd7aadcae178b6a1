"""
SnippetBox Backend — API Schemas
==================================

What:  Pydantic request/response models, kept separate from the ORM models.

Schema Inventory:
    - common.py:   ErrorResponse, HealthResponse
    - auth.py:     RegisterRequest, LoginRequest, AuthResponse, UserResponse
    - taxonomy.py: Language/Category/Tag requests and responses
    - snippet.py:  SnippetWriteRequest, SnippetResponse and nested file/tag models
"""
