# Routes package init
"""
Product Catalog Backend — API Routes Package
==============================================

Route Inventory:
    - products.py: POST   /products          (create, multipart)
                   GET    /products          (list)
                   PUT    /products/{id}     (update, multipart)
                   DELETE /products/{id}     (delete)
    - uploads.py:  GET    /uploads/{name}    (stored images)
    - health.py:   GET    /health            (service health check)

Routes stay thin: read the request, call a service, return its result.
Errors are raised, not returned, and formatted by the global handlers.
"""
