"""Servicios del Core (orquestación del paso `in`)."""
