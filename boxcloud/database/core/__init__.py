"""
Core functions connecting the routers with the data layer.

- schema       : table creation and legacy migrations
- funcs        : registration, login, license codes
- box_funcs    : box lifecycle and QR codes
- entry_funcs  : uploads, title-only entries, entry deletion
- public_funcs : public box view and statistics
- serializers  : entity → JSON dict conversion
"""
