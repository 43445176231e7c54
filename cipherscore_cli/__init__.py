"""
CipherScore CLI - Linha de comando do CipherScore
"""
