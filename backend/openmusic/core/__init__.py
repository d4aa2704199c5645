# Core package init
"""
OpenMusic API — Core Building Blocks
=====================================

What:  Framework-light helpers shared by every resource.

Inventory:
    - ids.py:      Prefixed opaque identifiers (song-…, playlist-…)
    - access.py:   Ownership/collaboration decision table
    - security.py: Bearer access-token verification dependency
    - routing.py:  Declarative route tables registered onto APIRouters
"""
