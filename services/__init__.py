"""
services/__init__.py

Stateful and platform-facing services around the routing engine:
- conversation_store: Bounded per-user conversation memory
- commands: Administrative chat commands (!clear, !help, !time)
"""
