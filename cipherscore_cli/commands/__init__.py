"""
Comandos da CLI
"""
