#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# archivo principal (mínimo)

import sys

from tunnelpage.run import main

if __name__ == "__main__":
    sys.exit(main())
