"""PageForge: element tree editing, AI page generation and A/B variants."""

__version__ = "0.1.0"
