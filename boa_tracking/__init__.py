"""BOA Tracking: backend de seguimiento de paquetes"""

__version__ = "1.0.0"
