"""
api/__init__.py

HTTP routers: liveness probes and the prompt/reset/diagnostic endpoints.
"""
