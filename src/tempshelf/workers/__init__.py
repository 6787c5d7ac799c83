# Filename: __init__.py
# Author: Rich Lewis @RichLewis007
# Description: Worker components package for background tasks. Exports the workers that
#              scan folders for copies and verify a dragged-out file against them.

__all__ = ["copy_scan_worker", "verification_worker"]
