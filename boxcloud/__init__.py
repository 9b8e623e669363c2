"""
PDF Box Cloud backend.

Authenticated users organize PDF files and title-only entries into named
boxes and can share a box through a public link / QR code.

Packages
--------
- api      : FastAPI routers, dependencies, models, middleware, upload and QR helpers
- crypt    : password hashing
- database : configuration, entities, DAOs, transactional core functions
"""
