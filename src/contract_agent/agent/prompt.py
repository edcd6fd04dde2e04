"""
agent.prompt - System directive for the contract table agent.

A function, not a constant: the tool list and the date anchor are filled
in per request.
"""

from __future__ import annotations

from contract_agent.application.context import RequestContext
from contract_agent.agent.tools.registry import ToolRegistry


def build_system_prompt(registry: ToolRegistry, ctx: RequestContext) -> str:
    """Build the system directive for one request.

    Args:
        registry: The tool registry with all registered tools.
        ctx:      Request context carrying the current-date anchor.

    Returns:
        The directive text, listing view and store operations separately.
    """
    view_names = [t.name for t in registry.all() if t.category == "view"]
    store_names = [t.name for t in registry.all() if t.category == "store"]

    today = ctx.today().isoformat()
    readable = f" ({ctx.current_date_readable})" if ctx.current_date_readable else ""

    rules = [
        "Only call the operations listed above. Never invent an operation or a parameter.",
        "Never fabricate contract data. Numbers, names and IDs in your answers must come from tool results.",
        "If a tool result reports an error or success=false, tell the user it failed and why. Never claim it worked.",
    ]
    if "updateContractByName" in registry or "deleteContractByName" in registry:
        rules.append(
            "When the user refers to a contract by its name (\"the Acme contract\"), "
            "use updateContractByName / deleteContractByName with that name. "
            "Do NOT guess or invent IDs; only use updateContract / deleteContract "
            "with an ID you have seen in a tool result."
        )
    rules += [
        f"Resolve relative dates (\"next month\", \"end of the year\", \"in 30 days\") from today's date, "
        f"{today}, and pass them as YYYY-MM-DD.",
        "Contract values are in dollars and go in \"amount\"; the client is \"counterpartyName\".",
        "duration, daysRemaining and monthlyAmount are calculated by the system. Never try to set them.",
        "For \"show/filter/sort/search\" requests use the table view operations; they do not change data.",
    ]
    numbered = "\n".join(f"{i}. {rule}" for i, rule in enumerate(rules, start=1))

    return f"""You manage a table of contracts for the user. Today is {today}{readable}.

You can only act through these operations:
- Table view (change what is displayed, no data is modified): {", ".join(view_names) or "none"}
- Contract data (read, change and analyse stored contracts): {", ".join(store_names) or "none"}

RULES:
{numbered}

Keep answers short and factual."""
