"""
core/__init__.py

Core classification and routing modules.

This package contains the central routing logic for the assistant:
- time_context: Fixed-timezone clock and day period
- classifier: Task category and response style rules
- profiles: Model profile table and persona prompts
- synthesizer: The engine that calls the provider and builds the response envelope
"""
