#!/usr/bin/env python3
"""
Entry point script for passive-scanner CLI.
Can be used directly: python -m passive_scanner
"""

if __name__ == "__main__":
    from passive_scanner.cli.main import main
    import sys
    sys.exit(main())
