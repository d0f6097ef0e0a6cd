"""
FILE: pcrm/core/__init__.py
PURPOSE: Domain layer (models, store, view engine, persistence, service)
"""
