"""MycoFlow Dashboard - live status and control surface for the MycoFlow QoS agent.

Polls the agent's ubus API for live metrics, persona classification and
bandwidth policy, and dispatches the operator's boost/throttle and persona
override commands.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
