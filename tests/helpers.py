"""
Constantes compartidas por los tests.
"""

from datetime import datetime

# Hora inicial del reloj fijo
START = datetime(2024, 5, 10, 9, 0, 0)
