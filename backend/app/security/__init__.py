"""
BileMo API — Security Package
===============================

    passwords.py      bcrypt hashing
    tokens.py         JWT issue/verify (python-jose)
    authorization.py  role/ownership predicate and policy table
    dependencies.py   FastAPI dependencies resolving the acting principal
"""
