"""
Run the Contract Table Agent REST API.

Usage:
    python run_api.py

Environment variables (all optional, also read from .env):
    LLM_PROVIDER          "openai", "groq", or "ollama" (default: openai)
    LLM_MODEL_OPENAI      Model name when LLM_PROVIDER=openai (default: gpt-4o-mini)
    LLM_MODEL_GROQ        Model name when LLM_PROVIDER=groq (default: llama-3.3-70b-versatile)
    LLM_MODEL_OLLAMA      Model name when LLM_PROVIDER=ollama (default: llama3.2)
    LLM_TEMPERATURE       Sampling temperature (default: 0)
    OPENAI_API_KEY        Required when LLM_PROVIDER=openai
    GROQ_API_KEY          Required when LLM_PROVIDER=groq
    OLLAMA_BASE_URL       Ollama server URL (default: http://localhost:11434/)
    AGENT_MAX_ITERATIONS  Operation rounds per request (default: 5)
    DB_PATH               SQLite database file path (default: contracts.db)
    CORS_ORIGINS          Comma-separated allowed origins (default: *)
    LOG_LEVEL             Logging level (default: INFO)
"""

import sys
from pathlib import Path

# Ensure src/ is importable without installing the package
sys.path.insert(0, str(Path(__file__).parent / "src"))

import uvicorn

if __name__ == "__main__":
    uvicorn.run(
        "contract_agent.adapters.rest.app:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
