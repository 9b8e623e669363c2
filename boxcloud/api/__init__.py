"""
API Package — FastAPI Routers • Models • JWT Utils • Uploads • QR
=================================================================

Mission
-------
This package defines the backend's HTTP interface and its support stack:
routing, bearer-token auth, multipart PDF intake and the JSON error contract.

Contents
--------
- routers
    FastAPI routers mounted under `/api`:
      • auth   : register (license-gated), login, me, logout
      • boxes  : box CRUD, QR code, uploads, title-only entries, entry deletion
      • public : unauthenticated box view and statistics
      • files  : inline display and download of stored PDFs

- dependencies
    `get_current_user` / `get_optional_user`, the access-control gate.

- models
    Pydantic request models (RegisterRequest, LoginRequest, BoxRequest,
    TitleRequest) plus FileRec and AuthenticatedUser.

- utils
    JWT helpers:
      • issue_token(user_id) — signed HS256 token with `sub`/`userId` and `exp`
      • verify_token(token) — validates a token and returns the user id

- upload_utilities
    Staging of uploads into the upload directory, size and type checks,
    best-effort file removal.

- qr
    Public box URL and QR data-URL rendering.

- errors / middleware
    Error taxonomy with JSON handlers; rate limiting and request size limits.

Operational Notes
-----------------
- Security: Auth via `Authorization: Bearer <token>`. Never log secrets or tokens.
- Files: stored under generated keys; only files referenced by an entry are served.
"""
