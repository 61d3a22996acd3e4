#!/usr/bin/env python3
"""Convenience runner for the field area survey tool.

Usage:
    python run.py replay --csv walks.csv
"""
import logging
from field_area.main import main

if __name__ == "__main__":
    if not logging.getLogger().hasHandlers():
        logging.basicConfig(level=logging.INFO, format="[%(asctime)s] %(levelname)s %(name)s: %(message)s")
    raise SystemExit(main())
