"""
Services Package for Menuboard
==============================

Business logic shared by the routes. Services take a SQLAlchemy session and
the acting user, enforce ownership, and raise ApiError for client errors.

Modules:
--------
- helpers.py: Tenant-scoped lookups, soft-delete helpers and serializers
- nested.py: Item/image creation and patch-array diffing
- users.py: Accounts, login and password reset
- menus.py, categories.py, items.py, images.py: Per-resource CRUD
"""
