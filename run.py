#!/usr/bin/env python3
"""Convenience runner for the offline trip report tool.

Usage:
    python run.py --track track.csv --pickup 51.5,-0.12 --delivery 51.5,-0.02
"""
import logging

from fleet_compliance.tools.trip_report import main

if __name__ == "__main__":
    if not logging.getLogger().hasHandlers():
        logging.basicConfig(level=logging.INFO, format="[%(asctime)s] %(levelname)s %(name)s: %(message)s")
    raise SystemExit(main())
