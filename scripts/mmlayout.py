#!/usr/bin/env python3
"""
mmlayout - repack and edit memory-map layouts from the command line.

Usage:
    python scripts/mmlayout.py insert ctrl.yml --kind field --anchor 0
    python scripts/mmlayout.py repack regs.yml --kind register --from 1 --json

See ``mmlayout.cli`` for the full list of subcommands.
"""
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from mmlayout.cli import main

if __name__ == "__main__":
    sys.exit(main())
