"""Run primitives (events, observable stores, and the run context).

Kept free of FastAPI and Redis concerns so the interpreter can be driven by
API routes and tests alike.
"""
