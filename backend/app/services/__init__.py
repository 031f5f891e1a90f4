"""
BileMo API — Services Layer
=============================

What:  Business logic between routes (HTTP) and repositories (persistence).
How:   Services receive the request's session, the list cache and the
       acting principal per call, and hold no state of their own.

Service Inventory:
    - CustomerService: customer CRUD, user linking
    - ProductService:  product CRUD
    - UserService:     user CRUD with ownership checks
    - AuthService:     credential check and token issuing

Write flow shared by every service:
    validate → mutate → commit → invalidate cache tags
    Invalidation runs only after the commit succeeded, so a failed write
    never evicts pages that are still correct.
"""
