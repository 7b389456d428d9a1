#!/usr/bin/env python3
"""Runtime Playground entry point"""

import sys

# Pre-load critical imports so a broken install fails with a hint
try:
    import aiohttp  # noqa
    import keyring  # noqa
    import qasync   # noqa
    from PyQt6.QtWidgets import QApplication  # noqa
except ImportError as e:
    print(f"Critical import failed: {e}")
    print("Please run: pip install -e .")
    sys.exit(1)


if __name__ == "__main__":
    sys.dont_write_bytecode = True
    from playground.ui.main import main
    try:
        main()
    except KeyboardInterrupt:
        pass
