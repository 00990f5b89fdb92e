"""
Feature modules for the Sama Conecta client core.

Each module is self-contained with its own:
- interfaces.py: Protocol definitions for the module's collaborators
- models.py: Pydantic models for data transfer
- service.py (or named implementation modules): behavior
- exceptions.py: Module-specific exceptions

Modules communicate through interfaces, not concrete implementations.
"""
