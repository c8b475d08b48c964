"""Interfaces/abstracciones del Core.

Por qué:
- Define contratos (Protocol) que implementan adaptadores concretos (CLI, storage).
- Permite invertir dependencias: el Core depende de abstracciones.
"""
