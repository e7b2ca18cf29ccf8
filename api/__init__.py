"""
FastAPI application package for the Cenly API.
"""
