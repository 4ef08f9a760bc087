# Repositories package init
"""
Product Catalog Backend — Repositories
========================================

What:  Persistence layer between services and the database.

Repository Inventory:
    - ProductRepository: products table (create, list, get, update, delete)
"""
