"""Address, key and amount helpers."""
