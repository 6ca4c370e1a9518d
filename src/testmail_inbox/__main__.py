#!/usr/bin/env python3
"""
Allow running testmail-inbox as a module: python -m testmail_inbox

This enables the following usage:
    python -m testmail_inbox new

Which is equivalent to:
    testmail-inbox new
"""

from testmail_inbox.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
