"""
Dispatch workflow: the station's entry -> permit -> payment -> departure pipeline
"""
