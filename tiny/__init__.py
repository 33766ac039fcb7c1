"""
semantic analysis for the Tiny language
"""
