"""Adaptadores concretos: binario fly (subprocess) y API HTTP (httpx)."""
