#!/usr/bin/env python3
"""
register.it DNS Manager - Main Entry Point

This is the main entry point for the register.it DNS Manager.
It can be run directly or imported as a module.
"""

from registerit_dns.cli.main import main

if __name__ == "__main__":
    main()
