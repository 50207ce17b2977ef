"""
Routers module - API endpoint handlers organized by feature.

- health: liveness endpoints
- auth: registration, login, current user
- google_auth: Google sign-in redirect and callback
- users: user profile CRUD
"""
