#!/usr/bin/env python3
"""
Doubles Court Rotation Scheduler
Entry point for the court rotation scheduling system.
"""

import sys

if __name__ == "__main__":
    from court_rotation.cli import main

    sys.exit(main())
