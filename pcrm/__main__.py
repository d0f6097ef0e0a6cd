"""
FILE: pcrm/__main__.py
PURPOSE: Allow `python -m pcrm` to run the CLI
NOTES:
  - Imports the CLI as a normal module so commands register on a single app
"""

from .cli.main import main

main()
