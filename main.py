# main.py - run the babbler CLI from a source checkout

import sys

from babbler.cli import main

if __name__ == "__main__":
    sys.exit(main())
