"""
CASPER HTTP backend (FastAPI).
"""
