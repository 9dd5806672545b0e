"""
Application Layer

Orchestrates domain objects and infrastructure to fulfil use cases.

Structure:
- services/: Application services, one per use-case family
- interfaces/: Port interfaces for infrastructure adapters
"""
