"""
BileMo API — API Routes Package
=================================

Route Inventory:
    - auth.py:       POST /api/login_check
    - customers.py:  /api/customers[/{id}]   (admin only)
    - products.py:   /api/products[/{id}]    (read: user, write: admin)
    - users.py:      /api/users[/{id}]       (user, ownership on single users)
    - health.py:     GET /health
    - pagination.py: shared page/limit dependency for the list routes

Design Principle:
    Routes are thin: extract parameters, resolve the principal through the
    `authorized(...)` dependency, call the service, shape the response
    (status code, Location header). Business logic lives in services.
"""
