"""
Run the Contract Table Agent CLI.

Usage:
    python run_cli.py [COMMAND] [OPTIONS]

Commands:
    init       Create the database schema
    seed       Insert demo contracts
    contracts  Show the contract table with derived fields
    tools      List the declared operations
    exec       Run one operation directly, bypassing the model
    ask        One-shot natural-language request
    chat       Interactive session

Examples:
    python run_cli.py seed
    python run_cli.py exec sortTable '{"column": "amount", "direction": "desc"}'
    python run_cli.py ask "delete the security audit contract"
    python run_cli.py chat --date 2025-06-01

Environment variables: see run_api.py.
"""

import sys
from pathlib import Path

# Ensure src/ is importable without installing the package
sys.path.insert(0, str(Path(__file__).parent / "src"))

from contract_agent.adapters.cli.main import app

if __name__ == "__main__":
    app()
