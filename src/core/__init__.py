"""Core del recurso: dominio, contratos, configuración y orquestación."""
