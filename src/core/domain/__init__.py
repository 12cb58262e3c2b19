"""Modelos y entidades del dominio.

- Estructuras de datos puras y estrictas (Pydantic v2).
- El dominio no conoce HTTP, subprocess ni CLI: solo conceptos del problema.
"""
