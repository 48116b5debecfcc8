"""
Real estate pro forma engine.
"""
