"""
Placement service: adaptive placement tests over a subject question bank.
"""
