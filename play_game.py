"""
Play the game in command line without installing the package.

Same arguments as the tty2048 command.
"""

import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "src"))

from tty2048.cli import main

if __name__ == "__main__":
    sys.exit(main())
