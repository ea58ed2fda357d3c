"""
Accounts and sessions.

Components:
- user_store.py: SQLite users/sessions, password hashing
- session_cookie.py: the session token persisted between console runs
- auth_api.py: signup / login / logout / demo auto-login actions
"""
