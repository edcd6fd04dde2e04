"""
agent - Tool-calling orchestration layer.

Contains the operation tools, the executor, the system prompt and the
orchestrator that runs the model <-> operation loop. Depends on domain/ and
application/. Never imports from infrastructure/.
"""
