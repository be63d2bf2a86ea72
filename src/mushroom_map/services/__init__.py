"""
Application services.

The callers around the pure engines: they load records from the store,
run ``analysis`` and persist the resulting state.

- observations.py - create, propose, vote, resolve, masked views
"""
