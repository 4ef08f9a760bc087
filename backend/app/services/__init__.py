# Services package init
"""
Product Catalog Backend — Services Layer
==========================================

Service Inventory:
    - ImageStore:     Flat directory of uploaded images (save, delete, resolve)
    - UploadHandler:  Stores a request's optional image, yields its public path
    - ProductService: Create / list / update / delete workflows
"""
