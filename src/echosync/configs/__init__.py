"""Node configurations.

To add a node:
1. Add a NodeTemplate to NODE_TEMPLATES in nodes.py
2. Bind it to a provider id; ids without a call path always run simulated
"""

from echosync.configs.nodes import NODE_TEMPLATES, NodeTemplate

__all__ = ["NODE_TEMPLATES", "NodeTemplate"]
