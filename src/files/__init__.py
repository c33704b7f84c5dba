"""
File-system helpers.

Shallow and recursive directory listing with hidden-file and package-boundary
filtering, plus rewriting of results relative to the scan root.
"""
