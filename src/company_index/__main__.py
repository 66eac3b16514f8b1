"""
Company Index - CLI Entry Point

Usage:
    python -m company_index [command] [options]
"""

from company_index.cli import app

if __name__ == "__main__":
    app()
