"""Aether - a streaming chat client for Gemini with web citations.

Combines FastAPI for HTTP streaming, Agno for the model call,
NiceGUI for visualization, and Pydantic for data validation.

Components:
    - api: HTTP endpoint relaying the model stream as SSE
    - agent: request assembly, model streaming, citation normalization
    - parsing: markdown to a typed block tree
    - ui: web interface, message store and client stream reducer
    - models: request/response and stream event schemas
"""

__version__ = "0.1.0"
