"""Enables running the server via: python -m runrunit_mcp"""

from runrunit_mcp.server import main

if __name__ == "__main__":
    main()
