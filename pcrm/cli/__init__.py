"""
FILE: pcrm/cli/__init__.py
PURPOSE: One-shot command line interface
"""
