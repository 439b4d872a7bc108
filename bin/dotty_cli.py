#!/usr/bin/env python3
"""Dotfile linking tool.

Mirrors a dotfiles tree into the home directory with symlinks,
controlled per file by optional Lua descriptors.
"""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "lib"))
from dotty.cli import main


if __name__ == "__main__":
    main()
