"""
Application Layer

Contains use cases and application services.
This layer orchestrates domain objects and infrastructure to fulfill use cases.

Structure:
- commands/: play requests and their handler
- services/: session queue, registry, catalog resolution and collection fill
- interfaces/: Port interfaces for infrastructure adapters
"""
