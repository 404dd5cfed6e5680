"""Allow running as ``python -m stripe_mcp``."""

from stripe_mcp.server import main

if __name__ == "__main__":
    main()
