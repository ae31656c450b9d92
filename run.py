#!/usr/bin/env python3
"""
PULKA Launcher
===============
Run this script to start the game.
"""

from pulka.main import main

if __name__ == "__main__":
    main()
