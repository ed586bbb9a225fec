"""
account_service package

This package contains the backend logic for the user account service.
It includes:

- FastAPI application (`main.py`) and routers (`routes/`)
- SQLAlchemy models, store and database integration (`models.py`, `store.py`, `db.py`)
- Password hashing and JWT issuance (`auth.py`)
- Account operations (`service.py`) and Pydantic schemas (`schemas.py`)
"""
