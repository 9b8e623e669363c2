"""
HTTP routers, all mounted under `/api`:

- auth   : registration, login, current user, logout
- boxes  : box and entry management for the authenticated owner
- public : read-only box view and statistics
- files  : stored PDF display and download
"""
