"""
domain - Entities, value objects, ports and exceptions.

No imports from infrastructure/, agent/ or adapters/.
"""
