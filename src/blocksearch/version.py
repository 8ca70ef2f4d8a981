VERSION = "0.1.0"

VERSION_INFO = f"""\
blocksearch {VERSION}

This program is free software.
Distribution is permitted under the terms of the GPLv3.
"""
