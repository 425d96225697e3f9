"""Chat booking agent tools."""

from salon.agents.tools.schedule_tools import create_schedule_tools

__all__ = [
    "create_schedule_tools",
]
