"""
Boundary layer for external system integrations.

Clients for the Ollama model server and the vector store backends.
"""
