#!/usr/bin/env python3
from hudson_license.cli import main

import sys


if __name__ == "__main__":
    sys.exit(main())
