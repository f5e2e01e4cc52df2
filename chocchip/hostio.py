#!/usr/bin/env python3

"""
Host I/O Functionality

Handles loading ROM binaries from the host file system, ready for the CPU to
copy into RAM.  ROMs are raw big-endian instructions with no header.
"""

__copyright__ = "Copyright (C) 2024 Gregory Maynard-Hoare"
__license__ = "GNU Affero General Public License v3.0"

import logging

logger = logging.getLogger(__name__)


class Loader:
    def load_binary(self, filename):
        with open(filename, "rb") as f:
            data = f.read()

        logger.debug("Read %d bytes from %s", len(data), filename)
        return data
