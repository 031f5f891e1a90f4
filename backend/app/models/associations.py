"""
BileMo API — Association Tables
=================================

What:  Link table for the many-to-many relation between customers and users.
Why:   A user can be shared by several customers (a reseller and its parent
       account, for instance) and a customer manages many users.

ON DELETE CASCADE on both foreign keys keeps the table consistent when rows
are removed outside the ORM; inside the ORM, SQLAlchemy deletes the link
rows itself before removing either side.
"""

from sqlalchemy import Column, ForeignKey, Integer, Table

from app.database import Base


customer_user = Table(
    "customer_user",
    Base.metadata,
    Column(
        "customer_id",
        Integer,
        ForeignKey("customers.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "user_id",
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)
