"""BDUI — backend des pages pilotées par contrats de blocs."""
