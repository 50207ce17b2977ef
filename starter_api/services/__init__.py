"""
Services module - business logic behind the routers.

- identity: maps credentials / OAuth profiles to users
- auth_service: register, login, OAuth login, me
- user_service: profile CRUD
- oauth_state: one-time CSRF state for the Google redirect
"""
