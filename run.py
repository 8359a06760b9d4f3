#!/usr/bin/env python3
"""Convenience runner for the trail enrichment build.

Usage:
    python run.py --data-dir data/trails --output-dir data/generated
"""
from trail_enrichment.main import main

if __name__ == "__main__":
    raise SystemExit(main())
